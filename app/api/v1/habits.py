"""
Habit API endpoints
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, status, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_user
from app.core.metrics import HABIT_COMPLETION_COUNT
from app.db.session import get_db
from app.models.user import User
from app.services import habits as habit_service

router = APIRouter()


class HabitCreate(BaseModel):
    """Create habit request model"""
    name: str = Field(..., max_length=255)
    description: Optional[str] = None
    stake_amount: Decimal = Field(Decimal("0"), description="Amount staked (KSH)")
    duration_days: int = Field(..., description="Days of streak needed to win the stake back")


class HabitComplete(BaseModel):
    notes: Optional[str] = None


@router.get("/")
async def list_habits(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    List the user's habits, newest first.
    """
    return await habit_service.list_habits(session, current_user.id)


@router.get("/summary")
async def habits_summary(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Dashboard counters for the user's habits.
    """
    return await habit_service.dashboard_summary(session, current_user.id)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_habit(
    habit_data: HabitCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Create a habit and stake the amount from the wallet.
    """
    habit = await habit_service.create_habit(
        session,
        current_user.id,
        name=habit_data.name,
        description=habit_data.description,
        stake_amount=habit_data.stake_amount,
        duration_days=habit_data.duration_days
    )
    return habit.to_dict()


@router.post("/{habit_id}/complete")
async def complete_habit(
    habit_id: UUID,
    body: Optional[HabitComplete] = None,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Check a habit in for today.
    """
    result = await habit_service.complete_habit(
        session,
        current_user.id,
        habit_id,
        notes=body.notes if body else None
    )
    HABIT_COMPLETION_COUNT.labels(outcome="goal_reached" if result.habit_completed else "checked_in").inc()
    if result.habit_completed:
        message = f"Habit completed! You earned {result.reward}"
    else:
        message = "Habit checked in for today"
    return {
        "success": True,
        "message": message,
        "habit_completed": result.habit_completed,
        "reward": str(result.reward),
        "habit": result.habit.to_dict()
    }


@router.delete("/{habit_id}")
async def delete_habit(
    habit_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Delete a habit and refund its stake.
    """
    refund = await habit_service.delete_habit(session, current_user.id, habit_id)
    return {"success": True, "refund": str(refund)}
