"""Literary analysis services.

Each analysis builds a fixed prompt around the document text, asks the gateway
for JSON at a task-specific temperature and validates it against the task's
result schema. ``ANALYSES`` registers every task under the analysis-type name
used by the HTTP layer, the cross-verification pass and the consensus runner.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter, ValidationError

from manuscript.app.llm.gateway import ProviderGateway
from manuscript.app.models.analysis import (
    AnalysisResult,
    CharacterInteractionAnalysis,
    CharacterVoiceAnalysis,
    ClarityAnalysis,
    DialogueAnalysis,
    MetaphorAnalysis,
    PacingAnalysis,
    PlotStructureAnalysis,
    ReadabilityAnalysis,
    SentimentArcAnalysis,
    ThemeAnalysis,
    WorldBuildingAnalysis,
)
from manuscript.app.models.common import ProviderId

logger = logging.getLogger(__name__)

DEFAULT_NARRATIVE_MODEL = "Three-Act Structure"
SENTIMENT_SEGMENTS = 10


async def _run(
    gateway: ProviderGateway,
    prompt: str,
    provider: ProviderId | str,
    schema: type[AnalysisResult],
    temperature: float,
    allow_fallback: bool,
) -> Any:
    return await gateway.get_structured_response(
        prompt, provider, schema, temperature=temperature, allow_fallback=allow_fallback
    )


async def analyze_metaphors(
    gateway: ProviderGateway,
    content: str,
    provider: ProviderId | str = ProviderId.openai,
    *,
    allow_fallback: bool = True,
) -> MetaphorAnalysis:
    """Find repeated metaphors and figurative language."""
    prompt = f"""Analyze the following text for repeated metaphors and figurative language. \
Identify patterns, frequency and effectiveness.

Text to analyze:
{content}

Provide your analysis as a JSON object with this structure:
{{
  "metaphors": [
    {{
      "text": "the actual metaphorical phrase",
      "type": "type of metaphor (e.g. 'nature metaphor', 'war metaphor')",
      "frequency": 1,
      "contexts": ["context1", "context2"],
      "suggestions": ["improvement1", "improvement2"]
    }}
  ],
  "summary": "overall analysis of metaphor usage and patterns"
}}"""
    return await _run(gateway, prompt, provider, MetaphorAnalysis, 0.4, allow_fallback)


async def analyze_character_voice(
    gateway: ProviderGateway,
    content: str,
    character_names: list[str],
    provider: ProviderId | str = ProviderId.openai,
    *,
    allow_fallback: bool = True,
) -> CharacterVoiceAnalysis:
    """Check each named character's voice for consistency."""
    prompt = f"""You are a literary analyst. Analyze the provided text for character voice \
consistency for the specified characters: {", ".join(character_names)}.

For each character, identify:
1. Unique voice characteristics (vocabulary, sentence structure, tone)
2. Consistent dialogue examples
3. Any inconsistencies in voice
4. Suggestions for improvement

Text to analyze:
{content}

Provide your analysis as a JSON object with this structure:
{{
  "characterAnalyses": [
    {{
      "characterName": "character name",
      "voiceDescription": "description of their unique voice",
      "consistentLines": ["example1", "example2"],
      "inconsistentLines": [
        {{
          "line": "problematic dialogue",
          "reason": "explanation of inconsistency",
          "suggestion": "how to fix it"
        }}
      ]
    }}
  ],
  "summary": "overall assessment of character voice consistency"
}}"""
    return await _run(gateway, prompt, provider, CharacterVoiceAnalysis, 0.4, allow_fallback)


async def check_world_building_consistency(
    gateway: ProviderGateway,
    content: str,
    world_rules: str,
    provider: ProviderId | str = ProviderId.openai,
    *,
    allow_fallback: bool = True,
) -> WorldBuildingAnalysis:
    """Compare the text against the author's world rules."""
    prompt = f"""You are a world-building consultant. Analyze the provided text for \
consistency with the established world rules.

World rules:
{world_rules}

Text to analyze:
{content}

Identify:
1. Elements that are consistent with the world rules
2. Any inconsistencies or contradictions
3. Underdeveloped areas that need more detail

Provide your analysis as a JSON object with this structure:
{{
  "consistentElements": [
    {{"element": "world element name", "description": "how it's portrayed", \
"examples": ["example1"]}}
  ],
  "inconsistencies": [
    {{"item": "inconsistent element", "description": "what the inconsistency is", \
"locationInText": "where it appears"}}
  ],
  "underdevelopedAreas": [
    {{"area": "area needing development", "suggestion": "how to improve it"}}
  ],
  "summary": "overall world-building assessment"
}}"""
    return await _run(gateway, prompt, provider, WorldBuildingAnalysis, 0.3, allow_fallback)


async def analyze_pacing(
    gateway: ProviderGateway,
    content: str,
    provider: ProviderId | str = ProviderId.openai,
    *,
    allow_fallback: bool = True,
) -> PacingAnalysis:
    """Rate the pace of each section of the text."""
    prompt = f"""You are a narrative pacing expert. Analyze the provided text for pacing \
issues and flow.

Text to analyze:
{content}

Evaluate:
1. Scene and chapter pacing
2. Dialogue vs. action balance
3. Information dumps or rushed sections
4. Overall narrative rhythm

Provide your analysis as a JSON object with this structure:
{{
  "sections": [
    {{
      "description": "section identifier",
      "paceRating": "slow|appropriate|fast",
      "comment": "detailed assessment",
      "suggestions": ["suggestion1", "suggestion2"]
    }}
  ],
  "overallPacingAssessment": "general pacing evaluation",
  "summary": "key pacing insights and recommendations"
}}"""
    return await _run(gateway, prompt, provider, PacingAnalysis, 0.4, allow_fallback)


async def analyze_plot_structure(
    gateway: ProviderGateway,
    content: str,
    narrative_model: str | None = None,
    provider: ProviderId | str = ProviderId.openai,
    *,
    allow_fallback: bool = True,
) -> PlotStructureAnalysis:
    """Map plot points against a narrative model (Three-Act Structure by default)."""
    model_name = narrative_model or DEFAULT_NARRATIVE_MODEL
    prompt = f"""You are a plot structure analyst. Analyze the provided text for narrative \
structure and plot development. Use the {model_name} narrative model as reference.

Text to analyze:
{content}

Identify:
1. Key plot points (inciting incident, rising action, climax, etc.)
2. Structural strengths and weaknesses
3. How well it aligns with the narrative model

Provide your analysis as a JSON object with this structure:
{{
  "identifiedPlotPoints": [
    {{"pointName": "plot point name", "description": "what happens", \
"locationInText": "where it occurs"}}
  ],
  "strengths": ["strength1", "strength2"],
  "weaknesses": ["weakness1", "weakness2"],
  "comparisonToModel": {{
    "modelName": "{model_name}",
    "alignmentNotes": "how well it follows the model"
  }},
  "summary": "overall structural assessment"
}}"""
    return await _run(gateway, prompt, provider, PlotStructureAnalysis, 0.4, allow_fallback)


async def analyze_themes_and_motifs(
    gateway: ProviderGateway,
    content: str,
    provider: ProviderId | str = ProviderId.openai,
    *,
    allow_fallback: bool = True,
) -> ThemeAnalysis:
    prompt = f"""You are a literary theme analyst. Analyze the provided text for themes, \
motifs and symbolic elements.

Text to analyze:
{content}

Identify:
1. Major and minor themes
2. Recurring motifs and symbols
3. How themes are developed throughout the text

Provide your analysis as a JSON object with this structure:
{{
  "themes": [
    {{
      "themeName": "theme name",
      "description": "what the theme represents",
      "occurrences": [{{"text": "relevant passage", "locationInText": "where it appears"}}],
      "developmentAssessment": "how well the theme is developed"
    }}
  ],
  "summary": "overall thematic analysis and recommendations"
}}"""
    return await _run(gateway, prompt, provider, ThemeAnalysis, 0.4, allow_fallback)


async def analyze_readability(
    gateway: ProviderGateway,
    content: str,
    provider: ProviderId | str = ProviderId.openai,
    *,
    allow_fallback: bool = True,
) -> ReadabilityAnalysis:
    """Estimate standard readability scores."""
    prompt = f"""Calculate the following readability scores for the text: Flesch Reading \
Ease, Flesch-Kincaid Grade Level and Gunning Fog Index (SMOG and Coleman-Liau are optional). \
Provide an interpretation and a summary.

Text:
{content}

Return a valid JSON object with this structure:
{{
  "scores": {{
    "fleschReadingEase": 0.0,
    "fleschKincaidGradeLevel": 0.0,
    "gunningFog": 0.0,
    "smogIndex": 0.0,
    "colemanLiauIndex": 0.0
  }},
  "interpretation": {{
    "readingEase": "what the reading ease score means",
    "gradeLevel": "the audience grade level"
  }},
  "summary": "overall readability assessment"
}}"""
    return await _run(gateway, prompt, provider, ReadabilityAnalysis, 0.1, allow_fallback)


async def analyze_dialogue(
    gateway: ProviderGateway,
    content: str,
    provider: ProviderId | str = ProviderId.openai,
    *,
    allow_fallback: bool = True,
) -> DialogueAnalysis:
    """Dialogue ratio, overused tags and speaker distribution."""
    prompt = f"""Analyze the dialogue in the text. Calculate the dialogue-to-narrative ratio, \
identify overused dialogue tags (like 'said') and provide a speaker distribution.

Text:
{content}

Return a valid JSON object with this structure:
{{
  "dialogueToNarrativeRatio": {{"dialogue": 0.4, "narrative": 0.6}},
  "dialogueTagAnalysis": {{
    "overusedTags": [{{"tag": "said", "count": 12, "alternatives": ["whispered"]}}],
    "varietyScore": 0
  }},
  "speakerDistribution": [{{"character": "name", "lineCount": 0}}],
  "summary": "overall dialogue assessment"
}}
"varietyScore" ranges from 0 to 100."""
    return await _run(gateway, prompt, provider, DialogueAnalysis, 0.4, allow_fallback)


async def analyze_clarity(
    gateway: ProviderGateway,
    content: str,
    provider: ProviderId | str = ProviderId.openai,
    *,
    allow_fallback: bool = True,
) -> ClarityAnalysis:
    """Find clichés, redundancies and jargon."""
    prompt = f"""Analyze the text for clichés, redundancies and jargon. For each finding, \
provide a suggestion for improvement.

Text:
{content}

Return a valid JSON object with this structure:
{{
  "cliches": [{{"cliche": "the phrase", "suggestion": "fresher alternative"}}],
  "redundancies": [{{"phrase": "the phrase", "suggestion": "tighter wording"}}],
  "jargon": [{{"term": "the term", "explanation": "what it means", \
"suggestion": "plainer wording"}}],
  "summary": "overall clarity assessment"
}}"""
    return await _run(gateway, prompt, provider, ClarityAnalysis, 0.3, allow_fallback)


async def analyze_sentiment_arc(
    gateway: ProviderGateway,
    content: str,
    provider: ProviderId | str = ProviderId.openai,
    *,
    allow_fallback: bool = True,
) -> SentimentArcAnalysis:
    """Score the emotional arc over equal segments of the text."""
    prompt = f"""Analyze the sentiment arc of the text. Divide the text into \
{SENTIMENT_SEGMENTS} equal segments. For each segment, provide a sentiment score from -1.0 \
(very negative) to 1.0 (very positive) and a justification.

Text:
{content}

Return a valid JSON object with this structure:
{{
  "sentimentArc": [
    {{"segment": 1, "score": 0.0, "textSample": "short excerpt", \
"justification": "why this score"}}
  ],
  "overallTrend": "how the sentiment evolves",
  "summary": "overall emotional arc assessment"
}}"""
    return await _run(gateway, prompt, provider, SentimentArcAnalysis, 0.4, allow_fallback)


async def analyze_character_interactions(
    gateway: ProviderGateway,
    content: str,
    provider: ProviderId | str = ProviderId.openai,
    *,
    allow_fallback: bool = True,
) -> CharacterInteractionAnalysis:
    """Map who interacts with whom, and how."""
    prompt = f"""Map the interactions between characters in the text. Identify all \
characters and describe the nature and frequency of their interactions.

Text:
{content}

Return a valid JSON object with this structure:
{{
  "characters": ["name1", "name2"],
  "interactions": [
    {{
      "characters": ["name1", "name2"],
      "interactionType": "positive|negative|neutral|conflict|cooperation",
      "frequency": 1,
      "keyMoments": ["moment1"]
    }}
  ],
  "summary": "overall assessment of character dynamics"
}}
Each interaction lists exactly two characters."""
    return await _run(
        gateway, prompt, provider, CharacterInteractionAnalysis, 0.5, allow_fallback
    )


# --- Registry ---


@dataclass(frozen=True)
class AnalysisParam:
    """Request parameter forwarded to an analysis function."""

    key: str
    argument: str
    annotation: Any = str
    required: bool = True


@dataclass(frozen=True)
class AnalysisSpec:
    """One registered analysis task."""

    analysis_type: str
    endpoint: str
    run: Callable[..., Awaitable[AnalysisResult]]
    schema: type[AnalysisResult]
    params: tuple[AnalysisParam, ...] = ()

    def collect_params(self, body: Mapping[str, Any]) -> dict[str, Any]:
        """Pick this task's parameters out of a request body.

        Raises:
            ValueError: If a required parameter is absent or empty, or a
                parameter has the wrong type
        """
        kwargs: dict[str, Any] = {}
        missing: list[str] = []
        invalid: list[str] = []
        for param in self.params:
            value = body.get(param.key)
            if value is None or value == "" or value == []:
                if param.required:
                    missing.append(param.key)
                continue
            try:
                kwargs[param.argument] = TypeAdapter(param.annotation).validate_python(
                    value, strict=True
                )
            except ValidationError:
                invalid.append(param.key)

        if missing:
            raise ValueError(
                f"Missing required parameter(s) for {self.analysis_type}: {', '.join(missing)}"
            )
        if invalid:
            raise ValueError(
                f"Invalid parameter(s) for {self.analysis_type}: {', '.join(invalid)}"
            )
        return kwargs

    async def __call__(
        self,
        gateway: ProviderGateway,
        content: str,
        params: Mapping[str, Any] | None = None,
        provider: ProviderId | str = ProviderId.openai,
        *,
        allow_fallback: bool = True,
    ) -> AnalysisResult:
        """Run the analysis with parameters already collected by ``collect_params``."""
        return await self.run(
            gateway, content, provider=provider, allow_fallback=allow_fallback, **(params or {})
        )


ANALYSES: dict[str, AnalysisSpec] = {
    spec.analysis_type: spec
    for spec in (
        AnalysisSpec("metaphor", "analyze-metaphors", analyze_metaphors, MetaphorAnalysis),
        AnalysisSpec(
            "characterVoice",
            "analyze-character-voice",
            analyze_character_voice,
            CharacterVoiceAnalysis,
            (AnalysisParam("characterNames", "character_names", list[str]),),
        ),
        AnalysisSpec(
            "worldBuilding",
            "check-world-building",
            check_world_building_consistency,
            WorldBuildingAnalysis,
            (AnalysisParam("worldRules", "world_rules"),),
        ),
        AnalysisSpec("pacing", "analyze-pacing", analyze_pacing, PacingAnalysis),
        AnalysisSpec(
            "plotStructure",
            "analyze-plot-structure",
            analyze_plot_structure,
            PlotStructureAnalysis,
            (AnalysisParam("narrativeModel", "narrative_model", required=False),),
        ),
        AnalysisSpec("theme", "analyze-themes", analyze_themes_and_motifs, ThemeAnalysis),
        AnalysisSpec(
            "readability", "analyze-readability", analyze_readability, ReadabilityAnalysis
        ),
        AnalysisSpec("dialogue", "analyze-dialogue", analyze_dialogue, DialogueAnalysis),
        AnalysisSpec("clarity", "analyze-clarity", analyze_clarity, ClarityAnalysis),
        AnalysisSpec(
            "sentiment", "analyze-sentiment", analyze_sentiment_arc, SentimentArcAnalysis
        ),
        AnalysisSpec(
            "interaction",
            "analyze-interactions",
            analyze_character_interactions,
            CharacterInteractionAnalysis,
        ),
    )
}


def get_analysis(analysis_type: str) -> AnalysisSpec:
    """Look up a registered analysis.

    Raises:
        KeyError: If the analysis type is unknown
    """
    try:
        return ANALYSES[analysis_type]
    except KeyError:
        logger.warning(f"Unknown analysis type requested: {analysis_type}")
        raise
