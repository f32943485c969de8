"""Document, revision and change-tracking models."""

from datetime import datetime

from pydantic import Field, field_validator

from manuscript.app.models.common import CamelModel, ChangeStatus, ChangeType


class ChangeSnapshot(CamelModel):
    """A proposed line change as captured on a revision (or returned by an AI edit)."""

    id: str | None = None
    type: ChangeType
    line_number: int = Field(..., ge=1, description="1-based line number")
    content: str
    original_content: str | None = None
    explanation: str | None = None
    status: ChangeStatus = ChangeStatus.pending

    @field_validator("id", mode="before")
    @classmethod
    def coerce_numeric_id(cls, v: object) -> object:
        """Vendors number their changes; ids are kept as strings."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class Document(CamelModel):
    """Stored document."""

    id: int
    name: str
    content: str
    original_content: str | None = None
    mime_type: str = "text/plain"
    created_at: datetime
    updated_at: datetime


class Revision(CamelModel):
    """Immutable snapshot of an edited text and the changes proposed for it."""

    id: int
    document_id: int
    content: str
    summary: str | None = None
    changes: list[ChangeSnapshot] = Field(default_factory=list)
    is_accepted: bool = False
    created_at: datetime


class Change(CamelModel):
    """Individually reviewable change record belonging to a revision."""

    id: int
    revision_id: int
    type: ChangeType
    line_number: int = Field(..., ge=1)
    content: str
    original_content: str | None = None
    explanation: str | None = None
    status: ChangeStatus = ChangeStatus.pending
    created_at: datetime


class DocumentCreate(CamelModel):
    """Input for creating a document."""

    name: str = Field(..., min_length=1, max_length=255)
    content: str
    original_content: str | None = None
    mime_type: str = "text/plain"


class DocumentUpdate(CamelModel):
    """Partial document update; only fields that are set are merged.

    ``original_content`` may be set to null to clear it; the other fields
    cannot be nulled.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = None
    original_content: str | None = None
    mime_type: str | None = None

    @field_validator("name", "content", "mime_type")
    @classmethod
    def reject_null(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("field cannot be null")
        return v


class RevisionCreate(CamelModel):
    """Input for creating a revision."""

    document_id: int
    content: str
    summary: str | None = None
    changes: list[ChangeSnapshot] = Field(default_factory=list)
    is_accepted: bool = False


class RevisionUpdate(CamelModel):
    """Partial revision update."""

    content: str | None = None
    summary: str | None = None
    changes: list[ChangeSnapshot] | None = None
    is_accepted: bool | None = None


class ChangeCreate(CamelModel):
    """Input for creating a change record. Every change starts out pending."""

    revision_id: int
    type: ChangeType
    line_number: int = Field(..., ge=1)
    content: str
    original_content: str | None = None
    explanation: str | None = None


class ChangeUpdate(CamelModel):
    """Partial change update."""

    type: ChangeType | None = None
    line_number: int | None = Field(None, ge=1)
    content: str | None = None
    original_content: str | None = None
    explanation: str | None = None
    status: ChangeStatus | None = None
