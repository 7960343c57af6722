#!/usr/bin/env python3
"""
Seed the sponsored habit catalog with sample brand challenges
Usage:
  python -m app.scripts.seed_sponsored_habits
"""
import asyncio
from decimal import Decimal
from sqlalchemy import select
from app.db.session import async_session
from app.models.sponsored_habit import SponsoredHabit

SAMPLE_HABITS = [
    {
        "brand_name": "Safaricom",
        "title": "30-Day Morning Run",
        "description": "Run at least 2km every morning for 30 days",
        "reward_amount": Decimal("500"),
        "duration_days": 30,
        "participants_count": 1243,
        "rating": Decimal("4.8"),
    },
    {
        "brand_name": "Java House",
        "title": "Mindful Coffee Break",
        "description": "Take a 10 minute screen-free break every day",
        "reward_amount": Decimal("250"),
        "duration_days": 14,
        "participants_count": 612,
        "rating": Decimal("4.5"),
    },
    {
        "brand_name": "Equity Bank",
        "title": "Daily Savings Habit",
        "description": "Save any amount every day for three weeks",
        "reward_amount": Decimal("1000"),
        "duration_days": 21,
        "participants_count": 2078,
        "rating": Decimal("4.9"),
    },
]


async def run():
    """Insert sample sponsored habits that are not present yet"""
    async with async_session() as db:
        created = 0
        for data in SAMPLE_HABITS:
            q = await db.execute(
                select(SponsoredHabit).where(
                    SponsoredHabit.brand_name == data["brand_name"],
                    SponsoredHabit.title == data["title"]
                )
            )
            if q.scalar_one_or_none():
                continue
            db.add(SponsoredHabit(**data))
            created += 1

        await db.commit()
        print(f"Seeded {created} sponsored habits")

if __name__ == "__main__":
    asyncio.run(run())
