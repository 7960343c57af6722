"""
Integration tests for habit, profile and sponsored habit API endpoints
"""

import pytest
from decimal import Decimal

from app.models.sponsored_habit import SponsoredHabit


async def create_habit(client, headers, name="Drink water", stake="100", duration=3):
    response = await client.post(
        "/api/v1/habits/",
        json={"name": name, "stake_amount": stake, "duration_days": duration},
        headers=headers
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_and_list_habits(test_client, auth_headers):
    habit = await create_habit(test_client, auth_headers)
    assert habit["name"] == "Drink water"
    assert Decimal(habit["stake_amount"]) == Decimal("100")
    assert habit["current_streak"] == 0
    assert habit["is_active"] is True

    response = await test_client.get("/api/v1/habits/", headers=auth_headers)
    assert response.status_code == 200
    habits = response.json()
    assert [h["id"] for h in habits] == [habit["id"]]
    assert habits[0]["completed_today"] is False

    wallet = await test_client.get("/api/v1/wallet/", headers=auth_headers)
    assert wallet.json()["balance"] == "9900.00"
    assert wallet.json()["total_staked"] == "100.00"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_habit_insufficient_balance(test_client, auth_headers):
    response = await test_client.post(
        "/api/v1/habits/",
        json={"name": "Big bet", "stake_amount": "20000", "duration_days": 7},
        headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Insufficient balance"

    habits = await test_client.get("/api/v1/habits/", headers=auth_headers)
    assert habits.json() == []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_complete_habit_endpoint(test_client, auth_headers):
    habit = await create_habit(test_client, auth_headers, stake="50", duration=1)

    response = await test_client.post(f"/api/v1/habits/{habit['id']}/complete", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["habit_completed"] is True
    assert body["reward"] == "60.00"
    assert body["habit"]["is_completed"] is True

    wallet = await test_client.get("/api/v1/wallet/", headers=auth_headers)
    assert wallet.json()["balance"] == "10010.00"
    assert wallet.json()["total_earned"] == "60.00"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_complete_twice_same_day_endpoint(test_client, auth_headers):
    habit = await create_habit(test_client, auth_headers, duration=5)

    first = await test_client.post(f"/api/v1/habits/{habit['id']}/complete", headers=auth_headers)
    assert first.status_code == 200
    assert first.json()["habit_completed"] is False

    second = await test_client.post(f"/api/v1/habits/{habit['id']}/complete", headers=auth_headers)
    assert second.status_code == 409
    assert second.json() == {"success": False, "error": "Already completed today"}

    summary = await test_client.get("/api/v1/habits/summary", headers=auth_headers)
    assert summary.json()["completed_today"] == 1
    assert summary.json()["best_streak"] == 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_delete_habit_refunds_stake(test_client, auth_headers):
    habit = await create_habit(test_client, auth_headers, stake="300")

    response = await test_client.delete(f"/api/v1/habits/{habit['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert Decimal(response.json()["refund"]) == Decimal("300")

    wallet = await test_client.get("/api/v1/wallet/", headers=auth_headers)
    assert wallet.json()["balance"] == "10000.00"

    missing = await test_client.delete(f"/api/v1/habits/{habit['id']}", headers=auth_headers)
    assert missing.status_code == 404


@pytest.mark.integration
@pytest.mark.asyncio
async def test_profile_endpoints(test_client, auth_headers):
    response = await test_client.get("/api/v1/profile/", headers=auth_headers)
    assert response.status_code == 200
    profile = response.json()
    assert profile["username"] == "wanjiku"
    assert profile["email"] == "wanjiku@example.com"
    assert profile["stats"] == {"best_streak": 0, "habits_completed": 0}

    response = await test_client.patch(
        "/api/v1/profile/",
        json={"mpesa_phone": "+254712345678"},
        headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["mpesa_phone"] == "254712345678"
    assert response.json()["username"] == "wanjiku"

    response = await test_client.patch("/api/v1/profile/", json={"mpesa_phone": "999"}, headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.integration
@pytest.mark.asyncio
async def test_sponsored_habits_ordered_by_popularity(test_client, session_factory):
    async with session_factory() as session:
        session.add_all([
            SponsoredHabit(brand_name="Java House", title="Coffee break", reward_amount=Decimal("250"),
                           duration_days=14, participants_count=600, rating=Decimal("4.5")),
            SponsoredHabit(brand_name="Safaricom", title="Morning run", reward_amount=Decimal("500"),
                           duration_days=30, participants_count=1200, rating=Decimal("4.8")),
            SponsoredHabit(brand_name="Retired", title="Old challenge", reward_amount=Decimal("100"),
                           duration_days=7, participants_count=5000, rating=Decimal("3.0"), is_active=False),
        ])
        await session.commit()

    response = await test_client.get("/api/v1/sponsored-habits/")
    assert response.status_code == 200
    titles = [h["title"] for h in response.json()]
    assert titles == ["Morning run", "Coffee break"]

    limited = await test_client.get("/api/v1/sponsored-habits/", params={"limit": 1})
    assert [h["title"] for h in limited.json()] == ["Morning run"]
