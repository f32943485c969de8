"""In-memory implementation of the change store."""

from datetime import datetime
from itertools import count

from manuscript.app.db.repositories import InvalidStatusTransitionError
from manuscript.app.models.common import RESOLVED_STATUSES, ChangeStatus
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


class InMemoryChangeStore:
    """In-memory implementation of ChangeStore.

    State lives for the lifetime of the instance; nothing is persisted.
    Concurrent writes to the same id are last-write-wins.
    """

    def __init__(self) -> None:
        self._documents: dict[int, Document] = {}
        self._revisions: dict[int, Revision] = {}
        self._changes: dict[int, Change] = {}
        self._document_ids = count(1)
        self._revision_ids = count(1)
        self._change_ids = count(1)

    # Documents

    def create_document(self, data: DocumentCreate) -> Document:
        """Create a new document."""
        now = datetime.now()
        document = Document(
            id=next(self._document_ids),
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        self._documents[document.id] = document
        return document

    def get_document(self, document_id: int) -> Document | None:
        """Get document by ID."""
        return self._documents.get(document_id)

    def list_documents(self) -> list[Document]:
        """List all documents in creation order."""
        return list(self._documents.values())

    def update_document(self, document_id: int, data: DocumentUpdate) -> Document | None:
        """Update an existing document."""
        document = self._documents.get(document_id)
        if document is None:
            return None

        fields = data.model_dump(exclude_unset=True)
        updated = document.model_copy(update={**fields, "updated_at": datetime.now()})
        self._documents[document_id] = updated
        return updated

    def delete_document(self, document_id: int) -> bool:
        """Delete a document, cascading to its revisions and their changes."""
        if self._documents.pop(document_id, None) is None:
            return False

        revision_ids = {
            revision.id
            for revision in self._revisions.values()
            if revision.document_id == document_id
        }
        for revision_id in revision_ids:
            del self._revisions[revision_id]

        orphaned = [
            change.id for change in self._changes.values() if change.revision_id in revision_ids
        ]
        for change_id in orphaned:
            del self._changes[change_id]

        return True

    # Revisions

    def create_revision(self, data: RevisionCreate) -> Revision:
        """Create a new revision."""
        revision = Revision(
            id=next(self._revision_ids),
            created_at=datetime.now(),
            **data.model_dump(),
        )
        self._revisions[revision.id] = revision
        return revision

    def get_revision(self, revision_id: int) -> Revision | None:
        """Get revision by ID."""
        return self._revisions.get(revision_id)

    def list_revisions_for_document(self, document_id: int) -> list[Revision]:
        """List revisions for a document."""
        return [
            revision for revision in self._revisions.values() if revision.document_id == document_id
        ]

    def update_revision(self, revision_id: int, data: RevisionUpdate) -> Revision | None:
        """Update an existing revision."""
        revision = self._revisions.get(revision_id)
        if revision is None:
            return None

        updated = Revision.model_validate(
            {**revision.model_dump(), **data.model_dump(exclude_unset=True, exclude_none=True)}
        )
        self._revisions[revision_id] = updated
        return updated

    # Changes

    def create_change(self, data: ChangeCreate) -> Change:
        """Create a new change record; its status is always pending."""
        change = Change(
            id=next(self._change_ids),
            status=ChangeStatus.pending,
            created_at=datetime.now(),
            **data.model_dump(),
        )
        self._changes[change.id] = change
        return change

    def get_change(self, change_id: int) -> Change | None:
        """Get change by ID."""
        return self._changes.get(change_id)

    def list_changes_for_revision(self, revision_id: int) -> list[Change]:
        """List changes for a revision."""
        return [change for change in self._changes.values() if change.revision_id == revision_id]

    def update_change(self, change_id: int, data: ChangeUpdate) -> Change | None:
        """Update an existing change record."""
        change = self._changes.get(change_id)
        if change is None:
            return None

        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        requested = fields.get("status")
        if requested is not None:
            _check_transition(change, ChangeStatus(requested))

        updated = change.model_copy(update=fields)
        self._changes[change_id] = updated
        return updated

    def update_change_status(self, change_id: int, status: ChangeStatus | str) -> Change | None:
        """Resolve a pending change as accepted or rejected."""
        try:
            requested = ChangeStatus(status)
        except ValueError:
            raise ValueError(f"Invalid change status: {status!r}") from None

        if requested not in RESOLVED_STATUSES:
            raise ValueError(f"Invalid change status: {requested.value!r}")

        change = self._changes.get(change_id)
        if change is None:
            return None

        _check_transition(change, requested)
        updated = change.model_copy(update={"status": requested})
        self._changes[change_id] = updated
        return updated


def _check_transition(change: Change, requested: ChangeStatus) -> None:
    """Only pending changes move; re-applying the same status is a no-op."""
    if change.status is ChangeStatus.pending or change.status is requested:
        return
    raise InvalidStatusTransitionError(change.id, change.status, requested)
