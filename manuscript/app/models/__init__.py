"""Models package - re-exports for convenience."""

from manuscript.app.models.analysis import (
    AnalysisResult,
    ChangeReview,
    CharacterInteractionAnalysis,
    CharacterVoiceAnalysis,
    ClarityAnalysis,
    ConsensusResult,
    DialogueAnalysis,
    EditResult,
    MetaphorAnalysis,
    PacingAnalysis,
    PlotStructureAnalysis,
    PromptSuggestions,
    ReadabilityAnalysis,
    SentimentArcAnalysis,
    ThemeAnalysis,
    VerificationMetadata,
    VerifiedAnalysis,
    WorldBuildingAnalysis,
)
from manuscript.app.models.common import (
    RESOLVED_STATUSES,
    CamelModel,
    ChangeStatus,
    ChangeType,
    EditType,
    ProviderId,
)
from manuscript.app.models.creative import ChapterOutline, ChapterSample, NovelSkeleton
from manuscript.app.models.documents import (
    Change,
    ChangeCreate,
    ChangeSnapshot,
    ChangeUpdate,
    Document,
    DocumentCreate,
    DocumentUpdate,
    Revision,
    RevisionCreate,
    RevisionUpdate,
)

__all__ = [
    # Common
    "CamelModel",
    "ProviderId",
    "ChangeType",
    "ChangeStatus",
    "EditType",
    "RESOLVED_STATUSES",
    # Documents
    "Document",
    "DocumentCreate",
    "DocumentUpdate",
    "Revision",
    "RevisionCreate",
    "RevisionUpdate",
    "Change",
    "ChangeCreate",
    "ChangeUpdate",
    "ChangeSnapshot",
    # Analysis
    "AnalysisResult",
    "EditResult",
    "PromptSuggestions",
    "ChangeReview",
    "MetaphorAnalysis",
    "CharacterVoiceAnalysis",
    "WorldBuildingAnalysis",
    "PacingAnalysis",
    "PlotStructureAnalysis",
    "ThemeAnalysis",
    "ReadabilityAnalysis",
    "DialogueAnalysis",
    "ClarityAnalysis",
    "SentimentArcAnalysis",
    "CharacterInteractionAnalysis",
    "VerificationMetadata",
    "VerifiedAnalysis",
    "ConsensusResult",
    # Creative
    "NovelSkeleton",
    "ChapterOutline",
    "ChapterSample",
]
