"""Integration tests for the dashboard and overview figures."""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.crm.models import User
from src.crm.models.base import utc_now
from tests.factories import EventFactory, HorseFactory, LessonFactory, PaymentFactory

pytestmark = pytest.mark.integration


@pytest.fixture
async def facility(
    db_session: AsyncSession, admin_user: User, trainer_user: User, member_user: User
) -> None:
    now = utc_now()
    db_session.add_all(
        [
            HorseFactory.build(),
            HorseFactory.build(),
            HorseFactory.build(is_active=False),
            LessonFactory.build(
                title="Trot poles",
                instructor_id=trainer_user.id,
                member_id=member_user.id,
                scheduled_date=now + timedelta(days=2),
            ),
            LessonFactory.build(
                instructor_id=trainer_user.id,
                member_id=member_user.id,
                scheduled_date=now + timedelta(days=20),
            ),
            LessonFactory.build(
                instructor_id=trainer_user.id,
                member_id=member_user.id,
                scheduled_date=now - timedelta(days=2),
                status="completed",
            ),
            EventFactory.build(title="Summer show", organizer_id=trainer_user.id),
            EventFactory.build(
                title="Open day", organizer_id=trainer_user.id, max_participants=None
            ),
            PaymentFactory.paid(member_id=member_user.id, amount=200.0),
            PaymentFactory.build(member_id=member_user.id, amount=40.0),
            PaymentFactory.past_due(member_id=member_user.id, amount=15.0),
        ]
    )
    await db_session.commit()


async def test_dashboard(client: AsyncClient, facility, member_headers):
    response = await client.get("/api/stats/dashboard", headers=member_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_horses"] == 2
    assert data["total_members"] == 1
    assert data["upcoming_lessons"] == 1
    assert data["active_events"] == 2
    assert data["pending_payments"] == 1
    assert data["pending_payments_amount"] == 40.0
    assert data["monthly_revenue"] == 200.0
    assert data["revenue_growth_percent"] == 100.0
    assert data["new_members_this_month"] == 1
    assert {e["participants"] for e in data["upcoming_events"]} == {"0/10", "0/∞"}
    assert {item["type"] for item in data["recent_activity"]} == {"lesson", "payment", "event"}
    messages = [item["message"] for item in data["recent_activity"]]
    assert "Payment of 200.00 received from Test Rider" in messages


async def test_dashboard_on_empty_facility(client: AsyncClient, member_headers):
    response = await client.get("/api/stats/dashboard", headers=member_headers)

    data = response.json()["data"]
    assert data["total_horses"] == 0
    assert data["monthly_revenue"] == 0
    assert data["revenue_growth_percent"] == 0
    assert data["upcoming_events"] == []
    assert data["recent_activity"] == []


async def test_overview(client: AsyncClient, facility, admin_headers):
    response = await client.get("/api/stats/overview", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["new_users_last_30_days"] == 3
    assert data["upcoming_lessons"] == 2
    assert data["total_revenue"] == 200.0


async def test_stats_require_authentication(client: AsyncClient):
    response = await client.get("/api/stats/dashboard")

    assert response.status_code == 401
