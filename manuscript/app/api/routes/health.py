"""Health check endpoint."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness check. The store is in-process, so there is nothing else to check."""
    return {"status": "ok"}
