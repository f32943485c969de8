"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys.

    Python code uses snake_case attributes; the wire format keeps the
    camelCase keys the editor client and the LLM prompts use.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProviderId(str, Enum):
    """Supported LLM vendors."""

    openai = "openai"
    google = "google"
    anthropic = "anthropic"
    cohere = "cohere"
    azure = "azure"
    huggingface = "huggingface"
    perplexity = "perplexity"

    def __str__(self) -> str:
        return self.value


class ChangeType(str, Enum):
    """Kind of line-level change."""

    addition = "addition"
    deletion = "deletion"
    modification = "modification"


class ChangeStatus(str, Enum):
    """Review state of a change. accepted/rejected are terminal."""

    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


RESOLVED_STATUSES = frozenset({ChangeStatus.accepted, ChangeStatus.rejected})


class EditType(str, Enum):
    """AI edit flavour."""

    developmental = "developmental"
    line = "line"
