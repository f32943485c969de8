"""AI editing services - developmental/line edits, prompt ideas, change review."""

import json
import logging

from manuscript.app.llm.gateway import ProviderGateway
from manuscript.app.models.analysis import ChangeReview, EditResult, PromptSuggestions
from manuscript.app.models.common import EditType, ProviderId
from manuscript.app.models.documents import ChangeSnapshot

logger = logging.getLogger(__name__)

DEVELOPMENTAL_EDIT_TEMPERATURE = 0.3
LINE_EDIT_TEMPERATURE = 0.2
PROMPT_SUGGESTIONS_TEMPERATURE = 0.7
CHANGE_REVIEW_TEMPERATURE = 0.1

_EDIT_RESPONSE_FORMAT = """{
  "editedContent": "the full edited text",
  "changes": [
    {
      "type": "addition|deletion|modification",
      "lineNumber": 1,
      "content": "new or changed line",
      "originalContent": "original line if modified or deleted",
      "explanation": "brief explanation of why this change was made"
    }
  ],
  "summary": "overall summary of the changes made"
}"""


def _developmental_prompt(content: str, instructions: str) -> str:
    return f"""You are a professional developmental editor. Improve the following text \
according to the editing instructions provided. The instructions may come from a style \
guide document or from custom editing requirements; apply them precisely.

Focus on:
1. Overall structure and organization
2. Clarity and flow of ideas
3. Content development and depth
4. Audience appropriateness
5. Coherence and logical progression

Original text to edit:
{content}

Editing instructions:
{instructions}

Line numbers in "changes" are 1-based and refer to the edited text (to the original text \
for deletions). Format your response as a JSON object with this structure:
{_EDIT_RESPONSE_FORMAT}"""


def _line_edit_prompt(content: str, instructions: str) -> str:
    return f"""You are a professional line editor. Improve the following text at the \
sentence and paragraph level according to the given instructions.

Focus on:
1. Grammar, punctuation and syntax
2. Word choice and precision
3. Sentence structure and variety
4. Tone and voice consistency
5. Readability and flow

Original text:
{content}

Instructions:
{instructions}

Track every change you make. Line numbers in "changes" are 1-based and refer to the edited \
text (to the original text for deletions). Format your response as a JSON object with this \
structure:
{_EDIT_RESPONSE_FORMAT}"""


async def perform_developmental_edit(
    gateway: ProviderGateway,
    content: str,
    instructions: str,
    provider: ProviderId | str = ProviderId.openai,
) -> EditResult:
    """Structural edit of a whole text (organization, flow, depth)."""
    prompt = _developmental_prompt(content, instructions)
    return await gateway.get_structured_response(
        prompt, provider, EditResult, temperature=DEVELOPMENTAL_EDIT_TEMPERATURE
    )


async def perform_line_edit(
    gateway: ProviderGateway,
    content: str,
    instructions: str,
    provider: ProviderId | str = ProviderId.openai,
) -> EditResult:
    """Sentence-level edit (grammar, word choice, rhythm)."""
    prompt = _line_edit_prompt(content, instructions)
    return await gateway.get_structured_response(
        prompt, provider, EditResult, temperature=LINE_EDIT_TEMPERATURE
    )


async def perform_edit(
    gateway: ProviderGateway,
    content: str,
    instructions: str,
    edit_type: EditType,
    provider: ProviderId | str = ProviderId.openai,
) -> EditResult:
    """Dispatch to the developmental or line edit by ``edit_type``."""
    logger.info(f"Running {edit_type.value} edit with {provider} ({len(content)} chars)")
    if edit_type == EditType.developmental:
        return await perform_developmental_edit(gateway, content, instructions, provider)
    return await perform_line_edit(gateway, content, instructions, provider)


async def generate_prompt_suggestions(
    gateway: ProviderGateway,
    content: str,
    context: str | None = None,
    provider: ProviderId | str = ProviderId.openai,
) -> list[str]:
    """Suggest five actionable editing prompts for the text."""
    context_block = f"Context: {context}\n\n" if context else ""
    prompt = f"""Based on the following text content, suggest 5 specific, actionable editing \
prompts that would improve the writing. Consider both developmental and line editing aspects.

Content:
{content}

{context_block}Provide 5 different editing prompts as a JSON object with a single key \
"suggestions" containing an array of strings. Example: {{"suggestions": ["prompt1", "prompt2"]}}"""

    result = await gateway.get_structured_response(
        prompt, provider, PromptSuggestions, temperature=PROMPT_SUGGESTIONS_TEMPERATURE
    )
    return result.suggestions


async def review_changes_with_instructions(
    gateway: ProviderGateway,
    changes: list[ChangeSnapshot],
    instructions: str,
    provider: ProviderId | str = ProviderId.openai,
) -> list[ChangeSnapshot]:
    """Have the AI accept or reject each proposed change against a style guide.

    Returns the reviewed list; when the response carries no ``changes`` key the
    input list is returned unchanged.
    """
    proposed = json.dumps(
        [change.model_dump(mode="json", by_alias=True) for change in changes], indent=2
    )
    prompt = f"""You are an executive editor. Review a list of proposed changes to a document \
and decide whether to "accept" or "reject" each one based on the style guide below.

Style guide:
---
{instructions}
---

For each change, analyze it against the style guide and set its "status" field to either \
"accepted" or "rejected". Do not modify any other fields.

Proposed changes:
{proposed}

Return the complete, updated list of changes in the same JSON format. The JSON response must \
contain a single key "changes" which is an array of the updated change objects."""

    result = await gateway.get_structured_response(
        prompt, provider, ChangeReview, temperature=CHANGE_REVIEW_TEMPERATURE
    )
    if result.changes is None:
        logger.warning("Change review response had no 'changes' key; returning input unchanged")
        return list(changes)
    return result.changes
