"""Revision and change-tracking endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field

from manuscript.app.api.deps import get_store, require_document
from manuscript.app.db.repositories import ChangeStore
from manuscript.app.models.common import RESOLVED_STATUSES, CamelModel, ChangeType
from manuscript.app.models.documents import Change, ChangeCreate, ChangeSnapshot, Revision
from manuscript.app.services.revisions import record_revision

router = APIRouter(tags=["revisions"])


class CreateRevisionRequest(CamelModel):
    """Request body for POST /documents/{id}/revisions.

    Omitting ``changes`` records a user-typed save: the changes are derived
    from the document's current content.
    """

    content: str
    summary: str | None = None
    changes: list[ChangeSnapshot] | None = None
    is_accepted: bool = False


class CreateChangeRequest(CamelModel):
    """Request body for POST /revisions/{id}/changes. New changes are always pending."""

    type: ChangeType
    line_number: int = Field(..., ge=1)
    content: str
    original_content: str | None = None
    explanation: str | None = None


class ChangeStatusRequest(CamelModel):
    """Request body for PATCH /changes/{id}/status."""

    status: str


@router.get("/documents/{document_id}/revisions", response_model=list[Revision])
async def list_revisions(
    document_id: int,
    store: Annotated[ChangeStore, Depends(get_store)],
) -> list[Revision]:
    require_document(store, document_id)
    return store.list_revisions_for_document(document_id)


@router.post(
    "/documents/{document_id}/revisions",
    response_model=Revision,
    status_code=status.HTTP_201_CREATED,
)
async def create_revision(
    document_id: int,
    request: CreateRevisionRequest,
    store: Annotated[ChangeStore, Depends(get_store)],
) -> Revision:
    """Record a revision and one change record per change."""
    document = require_document(store, document_id)
    return record_revision(
        store,
        document,
        request.content,
        changes=request.changes,
        summary=request.summary,
        is_accepted=request.is_accepted,
    )


@router.get("/revisions/{revision_id}/changes", response_model=list[Change])
async def list_changes(
    revision_id: int,
    store: Annotated[ChangeStore, Depends(get_store)],
) -> list[Change]:
    if store.get_revision(revision_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Revision not found")
    return store.list_changes_for_revision(revision_id)


@router.post(
    "/revisions/{revision_id}/changes",
    response_model=Change,
    status_code=status.HTTP_201_CREATED,
)
async def create_change(
    revision_id: int,
    request: CreateChangeRequest,
    store: Annotated[ChangeStore, Depends(get_store)],
) -> Change:
    if store.get_revision(revision_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Revision not found")
    return store.create_change(
        ChangeCreate(revision_id=revision_id, **request.model_dump())
    )


@router.patch("/changes/{change_id}/status", response_model=Change)
async def update_change_status(
    change_id: int,
    request: ChangeStatusRequest,
    store: Annotated[ChangeStore, Depends(get_store)],
) -> Change:
    """Accept or reject a pending change.

    Returns 400 for anything but accepted/rejected, 404 for an unknown change
    and 409 when the change was already resolved the other way.
    """
    if request.status not in {s.value for s in RESOLVED_STATUSES}:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid status")

    change = store.update_change_status(change_id, request.status)
    if change is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Change not found")
    return change
