"""Request dependencies - store and gateway live on ``app.state``."""

from fastapi import HTTPException, Request, status

from manuscript.app.db.repositories import ChangeStore
from manuscript.app.llm.gateway import ProviderGateway
from manuscript.app.models.documents import Document


def get_store(request: Request) -> ChangeStore:
    """Return the process-wide change store."""
    store: ChangeStore = request.app.state.store
    return store


def get_gateway(request: Request) -> ProviderGateway:
    """Return the process-wide provider gateway."""
    gateway: ProviderGateway = request.app.state.gateway
    return gateway


def require_document(store: ChangeStore, document_id: int) -> Document:
    """Load a document or raise 404."""
    document = store.get_document(document_id)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return document
