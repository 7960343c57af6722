"""
Habit and habit log repository
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional, Set
from uuid import UUID

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.habit import Habit
from app.models.habit_log import HabitLog


async def create_habit(
    session: AsyncSession,
    user_id: UUID,
    name: str,
    description: Optional[str],
    stake_amount: Decimal,
    duration_days: int,
    start_date: date
) -> Habit:
    """
    Insert a new active habit with zeroed streaks. Flushed, not committed.

    Args:
        session: Database session
        user_id: Owner UUID
        name: Habit name
        description: Optional description
        stake_amount: Stake locked for the habit
        duration_days: Goal length in days
        start_date: First day of the habit

    Returns:
        Created Habit instance
    """
    habit = Habit(
        user_id=user_id,
        name=name,
        description=description,
        stake_amount=stake_amount,
        duration_days=duration_days,
        start_date=start_date,
        end_date=start_date + timedelta(days=duration_days),
        is_active=True,
        is_completed=False,
        current_streak=0,
        best_streak=0
    )
    session.add(habit)
    await session.flush()
    return habit


async def get_habit_for_user(
    session: AsyncSession,
    user_id: UUID,
    habit_id: UUID,
    for_update: bool = False
) -> Optional[Habit]:
    """
    Get one habit owned by the user.

    Args:
        session: Database session
        user_id: Owner UUID
        habit_id: Habit UUID
        for_update: Lock the row for the rest of the database transaction

    Returns:
        Habit instance or None if not found
    """
    query = select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
    if for_update:
        query = query.with_for_update()
    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_habits_by_user(session: AsyncSession, user_id: UUID) -> List[Habit]:
    result = await session.execute(
        select(Habit)
        .where(Habit.user_id == user_id)
        .order_by(desc(Habit.created_at))
    )
    return list(result.scalars().all())


async def delete_habit(session: AsyncSession, habit: Habit) -> None:
    """Delete a habit together with its completion logs. Flushed, not committed."""
    await session.execute(delete(HabitLog).where(HabitLog.habit_id == habit.id))
    await session.delete(habit)
    await session.flush()


async def get_log_for_day(session: AsyncSession, habit_id: UUID, day: date) -> Optional[HabitLog]:
    result = await session.execute(
        select(HabitLog).where(HabitLog.habit_id == habit_id, HabitLog.completed_on == day)
    )
    return result.scalar_one_or_none()


async def create_log(
    session: AsyncSession,
    habit: Habit,
    day: date,
    notes: Optional[str] = None
) -> HabitLog:
    """
    Record a completion for the given day. Flushed, not committed.

    The (habit_id, completed_on) unique constraint raises IntegrityError on
    a duplicate day.
    """
    log = HabitLog(
        habit_id=habit.id,
        user_id=habit.user_id,
        completed_on=day,
        notes=notes
    )
    session.add(log)
    await session.flush()
    return log


async def get_habit_ids_completed_on(session: AsyncSession, user_id: UUID, day: date) -> Set[UUID]:
    result = await session.execute(
        select(HabitLog.habit_id).where(HabitLog.user_id == user_id, HabitLog.completed_on == day)
    )
    return set(result.scalars().all())
