"""
Health check endpoints
"""

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint
    Returns HTTP 200 with status ok and whether deposits run in demo mode
    """
    return {"status": "ok", "mpesa": "live" if settings.mpesa_configured else "demo"}
