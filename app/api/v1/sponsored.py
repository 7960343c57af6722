"""
Sponsored habit catalog endpoints
"""

from typing import Optional

from fastapi import APIRouter, Query, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.repos.sponsored_habit_repo import get_active_sponsored_habits

router = APIRouter()


@router.get("/")
async def list_sponsored_habits(
    limit: Optional[int] = Query(None, ge=1, le=100),
    session: AsyncSession = Depends(get_db)
):
    """
    Active brand challenges, most popular first.
    """
    habits = await get_active_sponsored_habits(session, limit=limit)
    return [habit.to_dict() for habit in habits]
