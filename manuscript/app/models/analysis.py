"""Result schemas for the editing and literary-analysis tasks.

Every schema is validated at the gateway boundary: a vendor response that
parses as JSON but does not fit the expected shape is treated as a parse
failure rather than passed through.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, ConfigDict, Field

from manuscript.app.models.common import CamelModel, ProviderId
from manuscript.app.models.documents import ChangeSnapshot


class AnalysisResult(CamelModel):
    """Base for analysis payloads.

    Extra keys are kept so that verification and consensus passes can attach
    their notes (``verificationNotes``, ``consensusNotes``) without a schema per
    combination.
    """

    model_config = ConfigDict(extra="allow")


# --- Editing ---


class EditResult(CamelModel):
    """Result of a developmental or line edit."""

    edited_content: str
    changes: list[ChangeSnapshot] = Field(default_factory=list)
    summary: str = ""


class PromptSuggestions(CamelModel):
    """Editing prompt suggestions."""

    suggestions: list[str] = Field(default_factory=list)


class ChangeReview(CamelModel):
    """AI review of proposed changes against a style guide."""

    changes: list[ChangeSnapshot] | None = None


# --- Metaphors ---


class MetaphorEntry(CamelModel):
    text: str
    type: str
    frequency: int = 1
    contexts: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class MetaphorAnalysis(AnalysisResult):
    metaphors: list[MetaphorEntry]
    summary: str


# --- Character voice ---


class InconsistentLine(CamelModel):
    line: str
    reason: str
    suggestion: str | None = None


class CharacterVoice(CamelModel):
    character_name: str
    voice_description: str
    consistent_lines: list[str] = Field(default_factory=list)
    inconsistent_lines: list[InconsistentLine] = Field(default_factory=list)


class CharacterVoiceAnalysis(AnalysisResult):
    character_analyses: list[CharacterVoice]
    summary: str


# --- World building ---


class ConsistentElement(CamelModel):
    element: str
    description: str
    examples: list[str] = Field(default_factory=list)


class WorldInconsistency(CamelModel):
    item: str
    description: str
    location_in_text: str = ""


class UnderdevelopedArea(CamelModel):
    area: str
    suggestion: str


class WorldBuildingAnalysis(AnalysisResult):
    consistent_elements: list[ConsistentElement] = Field(default_factory=list)
    inconsistencies: list[WorldInconsistency] = Field(default_factory=list)
    underdeveloped_areas: list[UnderdevelopedArea] = Field(default_factory=list)
    summary: str


# --- Pacing ---


class PacingSection(CamelModel):
    description: str
    pace_rating: Literal["slow", "appropriate", "fast"]
    comment: str
    suggestions: list[str] = Field(default_factory=list)


class PacingAnalysis(AnalysisResult):
    sections: list[PacingSection]
    overall_pacing_assessment: str
    summary: str = ""


# --- Plot structure ---


class PlotPoint(CamelModel):
    point_name: str
    description: str
    location_in_text: str = ""


class ModelComparison(CamelModel):
    model_name: str
    alignment_notes: str


class PlotStructureAnalysis(AnalysisResult):
    identified_plot_points: list[PlotPoint]
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    comparison_to_model: ModelComparison | None = None
    summary: str


# --- Themes ---


class ThemeOccurrence(CamelModel):
    text: str
    location_in_text: str = ""


class Theme(CamelModel):
    theme_name: str
    description: str
    occurrences: list[ThemeOccurrence] = Field(default_factory=list)
    development_assessment: str = ""


class ThemeAnalysis(AnalysisResult):
    themes: list[Theme]
    summary: str


# --- Readability ---


class ReadabilityScores(CamelModel):
    flesch_reading_ease: float
    flesch_kincaid_grade_level: float
    gunning_fog: float
    smog_index: float | None = None
    coleman_liau_index: float | None = None


class ReadabilityInterpretation(CamelModel):
    reading_ease: str
    grade_level: str


class ReadabilityAnalysis(AnalysisResult):
    scores: ReadabilityScores
    interpretation: ReadabilityInterpretation
    summary: str


# --- Dialogue ---


class DialogueRatio(CamelModel):
    dialogue: float
    narrative: float


class OverusedTag(CamelModel):
    tag: str
    count: int
    alternatives: list[str] = Field(default_factory=list)


class DialogueTagAnalysis(CamelModel):
    overused_tags: list[OverusedTag] = Field(default_factory=list)
    variety_score: float = Field(..., ge=0, le=100)


class SpeakerLines(CamelModel):
    character: str
    line_count: int


class DialogueAnalysis(AnalysisResult):
    dialogue_to_narrative_ratio: DialogueRatio
    dialogue_tag_analysis: DialogueTagAnalysis
    speaker_distribution: list[SpeakerLines] = Field(default_factory=list)
    summary: str


# --- Clarity ---


class ClicheFinding(CamelModel):
    cliche: str
    suggestion: str


class RedundancyFinding(CamelModel):
    phrase: str
    suggestion: str


class JargonFinding(CamelModel):
    term: str
    explanation: str
    suggestion: str


class ClarityAnalysis(AnalysisResult):
    cliches: list[ClicheFinding] = Field(default_factory=list)
    redundancies: list[RedundancyFinding] = Field(default_factory=list)
    jargon: list[JargonFinding] = Field(default_factory=list)
    summary: str


# --- Sentiment arc ---


class SentimentSegment(CamelModel):
    segment: int
    # Older prompts asked for "sentimentScore"
    score: float = Field(
        ..., ge=-1.0, le=1.0, validation_alias=AliasChoices("score", "sentimentScore")
    )
    text_sample: str | None = None
    justification: str


class SentimentArcAnalysis(AnalysisResult):
    sentiment_arc: list[SentimentSegment]
    overall_trend: str | None = None
    summary: str


# --- Character interactions ---


class CharacterInteraction(CamelModel):
    characters: list[str] = Field(..., min_length=2, max_length=2)
    interaction_type: Literal["positive", "negative", "neutral", "conflict", "cooperation"]
    frequency: int
    key_moments: list[str] = Field(default_factory=list)


class CharacterInteractionAnalysis(AnalysisResult):
    characters: list[str]
    interactions: list[CharacterInteraction]
    summary: str


# --- Verification and consensus ---


class VerificationMetadata(CamelModel):
    primary_provider: ProviderId
    verification_provider: ProviderId
    analysis_type: str
    timestamp: datetime


class VerifiedAnalysis(CamelModel):
    """Analysis enhanced by a second provider, with provenance of both passes."""

    analysis: dict[str, Any]
    metadata: VerificationMetadata


class ProviderFailure(CamelModel):
    provider: ProviderId
    error: str


class ConsensusResult(CamelModel):
    """Outcome of running one analysis across several providers."""

    analysis: dict[str, Any]
    providers_succeeded: list[ProviderId]
    providers_failed: list[ProviderFailure] = Field(default_factory=list)
    synthesized: bool
    synthesis_provider: ProviderId | None = None
