"""Health check endpoint."""

from fastapi import APIRouter

from services.school_store import get_school_store

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health():
    """Liveness probe with the current size of each collection."""
    return {"status": "healthy", "collections": get_school_store().sizes()}
