"""Integration tests for lesson booking and instructor conflict detection."""

from datetime import datetime

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.crm.models import User
from tests.factories import HorseFactory, LessonFactory, UserFactory
from tests.helpers import auth_headers, iso

pytestmark = pytest.mark.integration

MORNING = datetime(2030, 6, 3, 10, 0)


def lesson_payload(instructor: User, member: User, **overrides) -> dict:
    payload = {
        "title": "Jumping basics",
        "instructor_id": str(instructor.id),
        "member_id": str(member.id),
        "scheduled_date": iso(MORNING),
        "duration_minutes": 60,
        "cost": 45,
    }
    payload.update(overrides)
    return payload


class TestBooking:
    async def test_create_lesson_expands_references(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        trainer_user: User,
        member_user: User,
        trainer_headers,
    ):
        horse = HorseFactory.build(name="Pepper")
        db_session.add(horse)
        await db_session.commit()

        response = await client.post(
            "/api/lessons",
            headers=trainer_headers,
            json=lesson_payload(trainer_user, member_user, horse_id=str(horse.id)),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "scheduled"
        assert data["payment_status"] == "pending"
        assert data["end_time"] == "2030-06-03T11:00:00"
        assert data["instructor"]["id"] == str(trainer_user.id)
        assert data["member"]["email"] == member_user.email
        assert data["horse"]["name"] == "Pepper"

    async def test_overlapping_lesson_rejected(
        self, client: AsyncClient, trainer_user: User, member_user: User, trainer_headers
    ):
        first = await client.post(
            "/api/lessons", headers=trainer_headers, json=lesson_payload(trainer_user, member_user)
        )
        assert first.status_code == 201

        response = await client.post(
            "/api/lessons",
            headers=trainer_headers,
            json=lesson_payload(
                trainer_user, member_user, scheduled_date=iso(MORNING.replace(minute=30))
            ),
        )

        assert response.status_code == 400
        message = response.json()["message"]
        assert message.startswith("Scheduling conflict")
        assert "Jumping basics" in message

    async def test_back_to_back_lessons_allowed(
        self, client: AsyncClient, trainer_user: User, member_user: User, trainer_headers
    ):
        await client.post(
            "/api/lessons", headers=trainer_headers, json=lesson_payload(trainer_user, member_user)
        )

        response = await client.post(
            "/api/lessons",
            headers=trainer_headers,
            json=lesson_payload(
                trainer_user, member_user, scheduled_date=iso(MORNING.replace(hour=11))
            ),
        )

        assert response.status_code == 201

    async def test_other_instructor_same_slot_allowed(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        trainer_user: User,
        member_user: User,
        trainer_headers,
    ):
        other = UserFactory.trainer(email="other-trainer@example.com")
        db_session.add(other)
        await db_session.commit()
        await client.post(
            "/api/lessons", headers=trainer_headers, json=lesson_payload(trainer_user, member_user)
        )

        response = await client.post(
            "/api/lessons", headers=trainer_headers, json=lesson_payload(other, member_user)
        )

        assert response.status_code == 201

    async def test_cancelled_lesson_does_not_block(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        trainer_user: User,
        member_user: User,
        trainer_headers,
    ):
        db_session.add(
            LessonFactory.build(
                instructor_id=trainer_user.id,
                member_id=member_user.id,
                scheduled_date=MORNING,
                status="cancelled",
            )
        )
        await db_session.commit()

        response = await client.post(
            "/api/lessons", headers=trainer_headers, json=lesson_payload(trainer_user, member_user)
        )

        assert response.status_code == 201

    async def test_member_cannot_instruct(
        self, client: AsyncClient, member_user: User, trainer_headers
    ):
        response = await client.post(
            "/api/lessons", headers=trainer_headers, json=lesson_payload(member_user, member_user)
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Instructor must be a trainer or admin"

    @pytest.mark.parametrize("duration", [10, 300])
    async def test_duration_bounds(
        self,
        client: AsyncClient,
        trainer_user: User,
        member_user: User,
        trainer_headers,
        duration: int,
    ):
        response = await client.post(
            "/api/lessons",
            headers=trainer_headers,
            json=lesson_payload(trainer_user, member_user, duration_minutes=duration),
        )

        assert response.status_code == 400

    async def test_reschedule_into_conflict_rejected(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        trainer_user: User,
        member_user: User,
        trainer_headers,
    ):
        early = LessonFactory.build(
            instructor_id=trainer_user.id, member_id=member_user.id, scheduled_date=MORNING
        )
        late = LessonFactory.build(
            instructor_id=trainer_user.id,
            member_id=member_user.id,
            scheduled_date=MORNING.replace(hour=14),
        )
        db_session.add_all([early, late])
        await db_session.commit()

        response = await client.put(
            f"/api/lessons/{late.id}",
            headers=trainer_headers,
            json={"scheduled_date": iso(MORNING.replace(minute=45))},
        )
        unchanged = await client.get(f"/api/lessons/{late.id}", headers=trainer_headers)

        assert response.status_code == 400
        assert unchanged.json()["data"]["scheduled_date"] == "2030-06-03T14:00:00"

    async def test_extending_own_lesson_does_not_conflict_with_itself(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        trainer_user: User,
        member_user: User,
        trainer_headers,
    ):
        lesson = LessonFactory.build(
            instructor_id=trainer_user.id, member_id=member_user.id, scheduled_date=MORNING
        )
        db_session.add(lesson)
        await db_session.commit()

        response = await client.put(
            f"/api/lessons/{lesson.id}", headers=trainer_headers, json={"duration_minutes": 90}
        )

        assert response.status_code == 200
        assert response.json()["data"]["end_time"] == "2030-06-03T11:30:00"


class TestVisibility:
    async def test_member_sees_only_own_lessons(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        trainer_user: User,
        member_user: User,
        member_headers,
    ):
        someone_else = UserFactory.build(email="someone@example.com")
        db_session.add(someone_else)
        await db_session.flush()
        mine = LessonFactory.build(
            instructor_id=trainer_user.id, member_id=member_user.id, scheduled_date=MORNING
        )
        theirs = LessonFactory.build(
            instructor_id=trainer_user.id,
            member_id=someone_else.id,
            scheduled_date=MORNING.replace(hour=15),
        )
        db_session.add_all([mine, theirs])
        await db_session.commit()

        listing = await client.get("/api/lessons", headers=member_headers)
        forbidden = await client.get(f"/api/lessons/{theirs.id}", headers=member_headers)

        assert [lesson["id"] for lesson in listing.json()["data"]] == [str(mine.id)]
        assert forbidden.status_code == 403

    async def test_trainer_sees_only_lessons_they_teach(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        trainer_user: User,
        member_user: User,
        admin_user: User,
    ):
        other = UserFactory.trainer(email="other-trainer@example.com")
        db_session.add(other)
        await db_session.flush()
        db_session.add_all(
            [
                LessonFactory.build(instructor_id=trainer_user.id, member_id=member_user.id),
                LessonFactory.build(instructor_id=other.id, member_id=member_user.id),
            ]
        )
        await db_session.commit()

        as_trainer = await client.get("/api/lessons", headers=auth_headers(trainer_user))
        as_admin = await client.get("/api/lessons", headers=auth_headers(admin_user))

        assert as_trainer.json()["pagination"]["total"] == 1
        assert as_admin.json()["pagination"]["total"] == 2

    async def test_filter_by_status(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        trainer_user: User,
        member_user: User,
        admin_headers,
    ):
        db_session.add_all(
            [
                LessonFactory.build(instructor_id=trainer_user.id, member_id=member_user.id),
                LessonFactory.build(
                    instructor_id=trainer_user.id, member_id=member_user.id, status="completed"
                ),
            ]
        )
        await db_session.commit()

        response = await client.get("/api/lessons?status=completed", headers=admin_headers)

        assert [lesson["status"] for lesson in response.json()["data"]] == ["completed"]
