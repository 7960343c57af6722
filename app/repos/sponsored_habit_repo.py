"""
Sponsored habit repository (read-only catalog)
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import desc, select
from app.models.sponsored_habit import SponsoredHabit


async def get_active_sponsored_habits(
    session: AsyncSession,
    limit: Optional[int] = None
) -> List[SponsoredHabit]:
    """
    Get active sponsored habits, most popular first.

    Args:
        session: Database session
        limit: Maximum number of rows to return (optional)

    Returns:
        List of SponsoredHabit instances
    """
    query = (
        select(SponsoredHabit)
        .where(SponsoredHabit.is_active.is_(True))
        .order_by(desc(SponsoredHabit.participants_count))
    )
    if limit is not None:
        query = query.limit(limit)
    result = await session.execute(query)
    return list(result.scalars().all())
