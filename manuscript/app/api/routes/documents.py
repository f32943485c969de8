"""Document endpoints - CRUD on /documents."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from manuscript.app.api.deps import get_store, require_document
from manuscript.app.db.repositories import ChangeStore
from manuscript.app.models.documents import Document, DocumentCreate, DocumentUpdate

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get("", response_model=list[Document])
async def list_documents(store: Annotated[ChangeStore, Depends(get_store)]) -> list[Document]:
    """List all documents."""
    return store.list_documents()


@router.post("", response_model=Document, status_code=status.HTTP_201_CREATED)
async def create_document(
    request: DocumentCreate,
    store: Annotated[ChangeStore, Depends(get_store)],
) -> Document:
    """Create a document.

    Args:
        request: Name, content and optional original content / MIME type
        store: Change store

    Returns:
        The stored document with its generated id and timestamps
    """
    return store.create_document(request)


@router.get("/{document_id}", response_model=Document)
async def get_document(
    document_id: int,
    store: Annotated[ChangeStore, Depends(get_store)],
) -> Document:
    return require_document(store, document_id)


@router.put("/{document_id}", response_model=Document)
async def update_document(
    document_id: int,
    request: DocumentUpdate,
    store: Annotated[ChangeStore, Depends(get_store)],
) -> Document:
    """Merge the given fields into a document."""
    document = store.update_document(document_id, request)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return document


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: int,
    store: Annotated[ChangeStore, Depends(get_store)],
) -> Response:
    """Delete a document together with its revisions and changes."""
    if not store.delete_document(document_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
