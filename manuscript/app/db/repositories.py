"""Repository protocol interfaces for document, revision and change storage."""

from typing import Protocol

from manuscript.app.models.common import ChangeStatus
from manuscript.app.models.documents import (
    Change,
    ChangeCreate,
    ChangeUpdate,
    Document,
    DocumentCreate,
    DocumentUpdate,
    Revision,
    RevisionCreate,
    RevisionUpdate,
)


class InvalidStatusTransitionError(Exception):
    """A resolved change was asked to change status again."""

    def __init__(self, change_id: int, current: ChangeStatus, requested: ChangeStatus) -> None:
        super().__init__(
            f"Change {change_id} is already {current.value}; cannot mark it {requested.value}"
        )
        self.change_id = change_id
        self.current = current
        self.requested = requested


class ChangeStore(Protocol):
    """Storage for documents, their revisions and per-line changes.

    Lookups on unknown ids return None (or False for deletes); they never raise.
    Ids are generated by the store, strictly increasing per entity kind and
    never reused.
    """

    # Documents

    def create_document(self, data: DocumentCreate) -> Document:
        """Create a document, stamping created_at/updated_at."""
        ...

    def get_document(self, document_id: int) -> Document | None:
        """Get document by ID."""
        ...

    def list_documents(self) -> list[Document]:
        """List all documents."""
        ...

    def update_document(self, document_id: int, data: DocumentUpdate) -> Document | None:
        """Merge the fields set on ``data`` and refresh updated_at."""
        ...

    def delete_document(self, document_id: int) -> bool:
        """Delete a document (and its revisions and changes).

        Returns:
            True if the document existed and was removed
        """
        ...

    # Revisions

    def create_revision(self, data: RevisionCreate) -> Revision:
        """Create a revision."""
        ...

    def get_revision(self, revision_id: int) -> Revision | None:
        """Get revision by ID."""
        ...

    def list_revisions_for_document(self, document_id: int) -> list[Revision]:
        """List revisions belonging to a document."""
        ...

    def update_revision(self, revision_id: int, data: RevisionUpdate) -> Revision | None:
        """Merge the fields set on ``data``."""
        ...

    # Changes

    def create_change(self, data: ChangeCreate) -> Change:
        """Create a change record in the pending state."""
        ...

    def get_change(self, change_id: int) -> Change | None:
        """Get change by ID."""
        ...

    def list_changes_for_revision(self, revision_id: int) -> list[Change]:
        """List changes belonging to a revision."""
        ...

    def update_change(self, change_id: int, data: ChangeUpdate) -> Change | None:
        """Merge the fields set on ``data``.

        Raises:
            InvalidStatusTransitionError: If ``data`` re-resolves a resolved change
        """
        ...

    def update_change_status(self, change_id: int, status: ChangeStatus) -> Change | None:
        """Resolve a pending change as accepted or rejected.

        Raises:
            ValueError: If status is not accepted/rejected (storage is untouched)
            InvalidStatusTransitionError: If the change is already resolved
        """
        ...
