"""
Habit tracker service: stake-backed habits, daily check-ins and streaks
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import AlreadyCompletedToday, NotFound, ValidationError
from app.db.session import atomic
from app.models.enums import TransactionType
from app.models.habit import Habit
from app.repos import habit_repo
from app.repos.wallet_repo import CENTS, apply_ledger_entry, to_cents

# Configure logging
logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    habit: Habit
    habit_completed: bool
    reward: Decimal


def local_today() -> date:
    """Current calendar date in the configured habit timezone."""
    return datetime.now(ZoneInfo(settings.habit_timezone)).date()


def reward_for(stake_amount: Decimal) -> Decimal:
    """Stake returned plus the completion bonus."""
    return (Decimal(stake_amount) * settings.reward_multiplier).quantize(CENTS)


async def create_habit(
    session: AsyncSession,
    user_id: UUID,
    name: str,
    stake_amount: Decimal,
    duration_days: int,
    description: Optional[str] = None,
    today: Optional[date] = None
) -> Habit:
    """
    Debit the stake and create the habit as one unit.

    Args:
        session: Database session
        user_id: Owner UUID
        name: Habit name (required)
        stake_amount: Amount staked, >= 0
        duration_days: Goal length, > 0
        description: Optional description
        today: Start date override (defaults to the local date)

    Returns:
        Created Habit instance

    Raises:
        ValidationError: bad name, stake or duration
        InsufficientBalance: wallet cannot cover the stake
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Please enter a name for your habit")
    stake_amount = to_cents(stake_amount)
    if stake_amount < 0:
        raise ValidationError("Stake amount cannot be negative")
    if duration_days <= 0:
        raise ValidationError("Duration must be at least one day")

    start_date = today or local_today()

    async with atomic(session, "create habit"):
        habit = await habit_repo.create_habit(
            session,
            user_id=user_id,
            name=name,
            description=(description or "").strip() or None,
            stake_amount=stake_amount,
            duration_days=duration_days,
            start_date=start_date
        )
        if stake_amount > 0:
            await apply_ledger_entry(
                session,
                user_id,
                -stake_amount,
                TransactionType.STAKE,
                f"Stake for habit: {name}",
                habit_id=habit.id
            )

    logger.info(f"User {user_id} created habit {habit.id} staking {stake_amount} for {duration_days} days")
    return habit


async def complete_habit(
    session: AsyncSession,
    user_id: UUID,
    habit_id: UUID,
    today: Optional[date] = None,
    notes: Optional[str] = None
) -> CompletionResult:
    """
    Check a habit in for today, extend its streak and pay the reward once
    the streak reaches the goal.

    Raises:
        NotFound: habit does not exist for this user
        ValidationError: habit is no longer active
        AlreadyCompletedToday: habit was already checked in today
    """
    day = today or local_today()
    reward = Decimal("0")

    async with atomic(session, "complete habit"):
        habit = await habit_repo.get_habit_for_user(session, user_id, habit_id, for_update=True)
        if not habit:
            raise NotFound("Habit not found")
        if not habit.is_active or habit.is_completed:
            raise ValidationError("This habit is no longer active")

        if await habit_repo.get_log_for_day(session, habit.id, day):
            raise AlreadyCompletedToday()

        try:
            await habit_repo.create_log(session, habit, day, notes=notes)
        except IntegrityError:
            # Lost a race with a concurrent check-in for the same day
            raise AlreadyCompletedToday()

        new_streak = habit.current_streak + 1
        habit.current_streak = new_streak
        habit.best_streak = max(habit.best_streak, new_streak)

        habit_completed = new_streak >= habit.duration_days
        if habit_completed:
            habit.is_completed = True
            habit.is_active = False
            reward = reward_for(habit.stake_amount)
            if reward > 0:
                await apply_ledger_entry(
                    session,
                    user_id,
                    reward,
                    TransactionType.REWARD,
                    f"Completed habit: {habit.name} - Stake returned + 20% bonus!",
                    habit_id=habit.id
                )
        await session.flush()

    if habit_completed:
        logger.info(f"User {user_id} completed habit {habit.id}; rewarded {reward}")
    else:
        logger.info(f"User {user_id} checked in habit {habit.id}: streak {habit.current_streak}/{habit.duration_days}")
    return CompletionResult(habit=habit, habit_completed=habit_completed, reward=reward)


async def delete_habit(session: AsyncSession, user_id: UUID, habit_id: UUID) -> Decimal:
    """
    Delete a habit and refund its stake.

    A completed habit already paid its stake back through the reward, so
    it is removed without a refund.

    Returns:
        The refunded amount
    """
    async with atomic(session, "delete habit"):
        habit = await habit_repo.get_habit_for_user(session, user_id, habit_id, for_update=True)
        if not habit:
            raise NotFound("Habit not found")

        refund = Decimal("0") if habit.is_completed else Decimal(habit.stake_amount)
        if refund > 0:
            await apply_ledger_entry(
                session,
                user_id,
                refund,
                TransactionType.REFUND,
                f"Refund from deleted habit: {habit.name}",
                habit_id=habit.id
            )
        await habit_repo.delete_habit(session, habit)

    logger.info(f"User {user_id} deleted habit {habit_id}; refunded {refund}")
    return refund


async def list_habits(
    session: AsyncSession,
    user_id: UUID,
    today: Optional[date] = None
) -> List[Dict]:
    """Habits newest first, each flagged with whether it was checked in today."""
    day = today or local_today()
    habits = await habit_repo.get_habits_by_user(session, user_id)
    done_today = await habit_repo.get_habit_ids_completed_on(session, user_id, day)

    items = []
    for habit in habits:
        item = habit.to_dict()
        item["completed_today"] = habit.id in done_today
        items.append(item)
    return items


async def dashboard_summary(
    session: AsyncSession,
    user_id: UUID,
    today: Optional[date] = None
) -> Dict:
    day = today or local_today()
    habits = await habit_repo.get_habits_by_user(session, user_id)
    done_today = await habit_repo.get_habit_ids_completed_on(session, user_id, day)

    active = [h for h in habits if h.is_active and not h.is_completed]
    completed = [h for h in habits if h.is_completed]
    return {
        "active_habits": len(active),
        "completed_habits": len(completed),
        "completed_today": sum(1 for h in active if h.id in done_today),
        "total_staked": str(sum((Decimal(h.stake_amount) for h in active), Decimal("0"))),
        "best_streak": max((h.best_streak for h in habits), default=0),
    }
