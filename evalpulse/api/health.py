"""Health endpoint."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness check; does not touch the database."""
    return {"status": "ok", "service": "evalpulse"}
