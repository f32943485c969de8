"""Recording revisions together with their reviewable change records."""

import logging

from manuscript.app.db.repositories import ChangeStore
from manuscript.app.diff.line_differ import diff_to_changes
from manuscript.app.models.common import ChangeStatus
from manuscript.app.models.documents import (
    ChangeCreate,
    ChangeSnapshot,
    Document,
    Revision,
    RevisionCreate,
)

logger = logging.getLogger(__name__)


def record_revision(
    store: ChangeStore,
    document: Document,
    content: str,
    changes: list[ChangeSnapshot] | None = None,
    summary: str | None = None,
    is_accepted: bool = False,
) -> Revision:
    """Persist a revision of ``document`` and one Change record per proposed change.

    When ``changes`` is empty or None the changes are derived with the line
    differ from the document's current content to ``content``. Every recorded
    change starts out pending; snapshots without an id get a sequential one.
    """
    if not changes:
        changes = diff_to_changes(document.content, content)
        logger.info(
            f"Derived {len(changes)} change(s) for document {document.id} with the line differ"
        )

    snapshots = [
        change.model_copy(
            update={"id": change.id or str(position), "status": ChangeStatus.pending}
        )
        for position, change in enumerate(changes, start=1)
    ]

    revision = store.create_revision(
        RevisionCreate(
            document_id=document.id,
            content=content,
            summary=summary,
            changes=snapshots,
            is_accepted=is_accepted,
        )
    )

    for snapshot in snapshots:
        store.create_change(
            ChangeCreate(
                revision_id=revision.id,
                type=snapshot.type,
                line_number=snapshot.line_number,
                content=snapshot.content,
                original_content=snapshot.original_content,
                explanation=snapshot.explanation,
            )
        )

    return revision
