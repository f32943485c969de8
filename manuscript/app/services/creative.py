"""Creative writing services - novel skeleton, chapter outline, chapter sample."""

import json

from manuscript.app.llm.gateway import ProviderGateway
from manuscript.app.models.common import ProviderId
from manuscript.app.models.creative import ChapterOutline, ChapterSample, NovelSkeleton

SKELETON_TEMPERATURE = 0.7
OUTLINE_TEMPERATURE = 0.6
SAMPLE_TEMPERATURE = 0.8


async def generate_novel_skeleton(
    gateway: ProviderGateway,
    concept: str,
    provider: ProviderId | str = ProviderId.openai,
) -> NovelSkeleton:
    """Expand a high-level concept into a novel skeleton."""
    prompt = f"""Based on the following high-level concept, generate a detailed novel \
skeleton. The skeleton should include a title, a logline, a list of main themes, character \
descriptions and a breakdown of major plot points.

Concept: "{concept}"

Return a valid JSON object with this structure:
{{
  "title": "working title",
  "logline": "one-sentence pitch",
  "themes": ["theme1", "theme2"],
  "characters": [{{"name": "name", "description": "who they are", "motivation": "what they want"}}],
  "plotPoints": [{{"act": "Act I", "point": "plot point name", "description": "what happens"}}]
}}"""
    return await gateway.get_structured_response(
        prompt, provider, NovelSkeleton, temperature=SKELETON_TEMPERATURE
    )


async def generate_chapter_outline(
    gateway: ProviderGateway,
    skeleton: NovelSkeleton,
    chapter_number: int,
    provider: ProviderId | str = ProviderId.openai,
) -> ChapterOutline:
    """Outline one chapter of a novel skeleton scene by scene."""
    prompt = f"""Given the following novel skeleton, generate a detailed chapter outline for \
Chapter {chapter_number}. The outline should include a chapter title, a summary of the chapter \
and a breakdown of scenes with settings, characters and key actions.

Novel skeleton:
{json.dumps(skeleton.model_dump(by_alias=True), indent=2)}

Return a valid JSON object with this structure:
{{
  "chapter": {chapter_number},
  "title": "chapter title",
  "summary": "what happens in the chapter",
  "scenes": [{{"scene": 1, "setting": "where", "characters": ["name"], "action": "what happens"}}]
}}"""
    return await gateway.get_structured_response(
        prompt, provider, ChapterOutline, temperature=OUTLINE_TEMPERATURE
    )


async def generate_chapter_sample(
    gateway: ProviderGateway,
    outline: ChapterOutline,
    world_anvil: str,
    provider: ProviderId | str = ProviderId.openai,
) -> ChapterSample:
    """Write sample prose for a chapter outline.

    ``world_anvil`` carries the sensory details and world-building rules the
    prose should draw on.
    """
    prompt = f"""Write a 1-2 page sample of a chapter based on the provided outline and \
world-building information. The writing should be engaging, with a strong narrative voice, \
distinct character voices, rich sensory details from the world anvil and emotional depth.

Chapter outline:
{json.dumps(outline.model_dump(by_alias=True), indent=2)}

World anvil (sensory details and rules):
{world_anvil}

Return the generated prose as a JSON object with a single key "sample" containing the text."""
    return await gateway.get_structured_response(
        prompt, provider, ChapterSample, temperature=SAMPLE_TEMPERATURE
    )
