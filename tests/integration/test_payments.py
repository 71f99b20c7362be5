"""Integration tests for payments, lazy overdue detection and summaries."""

import re
from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.crm.models import User
from src.crm.models.base import utc_now
from tests.factories import PaymentFactory, UserFactory
from tests.helpers import iso

pytestmark = pytest.mark.integration

INVOICE_PATTERN = re.compile(r"^INV-\d{13}-\d+$")


def payment_payload(member: User, **overrides) -> dict:
    payload = {
        "member_id": str(member.id),
        "amount": 80,
        "payment_type": "lesson",
        "payment_method": "card",
        "due_date": iso(utc_now() + timedelta(days=10)),
    }
    payload.update(overrides)
    return payload


class TestCreatePayment:
    async def test_invoice_number_generated(
        self, client: AsyncClient, member_user: User, trainer_headers
    ):
        first = await client.post(
            "/api/payments", headers=trainer_headers, json=payment_payload(member_user)
        )
        second = await client.post(
            "/api/payments", headers=trainer_headers, json=payment_payload(member_user)
        )

        assert first.status_code == 201
        first_invoice = first.json()["data"]["invoice_number"]
        second_invoice = second.json()["data"]["invoice_number"]
        assert INVOICE_PATTERN.match(first_invoice)
        assert first_invoice.endswith("-1")
        assert second_invoice.endswith("-2")
        assert first.json()["data"]["member"]["id"] == str(member_user.id)

    async def test_duplicate_invoice_number_rejected(
        self, client: AsyncClient, member_user: User, trainer_headers
    ):
        payload = payment_payload(member_user, invoice_number="INV-CUSTOM-1")
        await client.post("/api/payments", headers=trainer_headers, json=payload)

        response = await client.post("/api/payments", headers=trainer_headers, json=payload)

        assert response.status_code == 400
        assert response.json()["message"] == "Invoice number already exists"

    async def test_past_due_pending_created_as_overdue(
        self, client: AsyncClient, member_user: User, trainer_headers
    ):
        response = await client.post(
            "/api/payments",
            headers=trainer_headers,
            json=payment_payload(member_user, due_date=iso(utc_now() - timedelta(days=1))),
        )

        assert response.json()["data"]["status"] == "overdue"

    async def test_paid_on_creation_stamps_paid_date(
        self, client: AsyncClient, member_user: User, trainer_headers
    ):
        response = await client.post(
            "/api/payments",
            headers=trainer_headers,
            json=payment_payload(member_user, status="paid"),
        )

        data = response.json()["data"]
        assert data["status"] == "paid"
        assert data["paid_date"] is not None

    async def test_paid_date_dropped_when_not_paid(
        self, client: AsyncClient, member_user: User, trainer_headers
    ):
        response = await client.post(
            "/api/payments",
            headers=trainer_headers,
            json=payment_payload(member_user, paid_date=iso(utc_now())),
        )

        data = response.json()["data"]
        assert data["status"] == "pending"
        assert data["paid_date"] is None

    async def test_reference_pair_required(
        self, client: AsyncClient, member_user: User, trainer_headers
    ):
        response = await client.post(
            "/api/payments",
            headers=trainer_headers,
            json=payment_payload(member_user, reference_type="lesson"),
        )

        assert response.status_code == 400

    async def test_unknown_member(self, client: AsyncClient, trainer_headers):
        response = await client.post(
            "/api/payments",
            headers=trainer_headers,
            json=payment_payload(UserFactory.build()),
        )

        assert response.status_code == 400
        assert "not found" in response.json()["message"]


class TestOverdue:
    async def test_pending_past_due_read_as_overdue(
        self, client: AsyncClient, db_session: AsyncSession, member_user: User, trainer_headers
    ):
        payment = PaymentFactory.past_due(member_id=member_user.id)
        db_session.add(payment)
        await db_session.commit()

        response = await client.get(f"/api/payments/{payment.id}", headers=trainer_headers)

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "overdue"

    async def test_member_reads_own_payment_after_sweep(
        self, client: AsyncClient, db_session: AsyncSession, member_user: User, member_headers
    ):
        past_due = PaymentFactory.past_due(member_id=member_user.id)
        db_session.add(past_due)
        await db_session.commit()

        listing = await client.get("/api/payments", headers=member_headers)

        assert listing.status_code == 200
        assert [p["status"] for p in listing.json()["data"]] == ["overdue"]

        later = PaymentFactory.past_due(member_id=member_user.id)
        db_session.add(later)
        await db_session.commit()

        fetched = await client.get(f"/api/payments/{later.id}", headers=member_headers)

        assert fetched.status_code == 200
        assert fetched.json()["data"]["status"] == "overdue"

    async def test_overdue_persisted_and_filterable(
        self, client: AsyncClient, db_session: AsyncSession, member_user: User, trainer_headers
    ):
        db_session.add_all(
            [
                PaymentFactory.past_due(member_id=member_user.id),
                PaymentFactory.build(member_id=member_user.id),
            ]
        )
        await db_session.commit()

        overdue = await client.get("/api/payments?status=overdue", headers=trainer_headers)
        pending = await client.get("/api/payments?status=pending", headers=trainer_headers)

        assert overdue.json()["pagination"]["total"] == 1
        assert pending.json()["pagination"]["total"] == 1

    async def test_extending_due_date_returns_to_pending(
        self, client: AsyncClient, db_session: AsyncSession, member_user: User, trainer_headers
    ):
        payment = PaymentFactory.past_due(member_id=member_user.id)
        db_session.add(payment)
        await db_session.commit()

        response = await client.put(
            f"/api/payments/{payment.id}",
            headers=trainer_headers,
            json={"due_date": iso(utc_now() + timedelta(days=14))},
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "pending"

    async def test_cancelled_payment_never_goes_overdue(
        self, client: AsyncClient, db_session: AsyncSession, member_user: User, trainer_headers
    ):
        payment = PaymentFactory.past_due(member_id=member_user.id, status="cancelled")
        db_session.add(payment)
        await db_session.commit()

        response = await client.get(f"/api/payments/{payment.id}", headers=trainer_headers)

        assert response.json()["data"]["status"] == "cancelled"


class TestStatusChanges:
    async def test_mark_paid_stamps_paid_date(
        self, client: AsyncClient, db_session: AsyncSession, member_user: User, trainer_headers
    ):
        payment = PaymentFactory.build(member_id=member_user.id)
        db_session.add(payment)
        await db_session.commit()

        response = await client.patch(
            f"/api/payments/{payment.id}/status",
            headers=trainer_headers,
            json={"status": "paid"},
        )

        data = response.json()["data"]
        assert data["status"] == "paid"
        assert data["paid_date"] is not None

    async def test_explicit_paid_date_kept(
        self, client: AsyncClient, db_session: AsyncSession, member_user: User, trainer_headers
    ):
        payment = PaymentFactory.build(member_id=member_user.id)
        db_session.add(payment)
        await db_session.commit()

        response = await client.patch(
            f"/api/payments/{payment.id}/status",
            headers=trainer_headers,
            json={"status": "paid", "paid_date": "2030-01-05T12:00:00Z"},
        )

        assert response.json()["data"]["paid_date"] == "2030-01-05T12:00:00"

    async def test_reopening_clears_paid_date(
        self, client: AsyncClient, db_session: AsyncSession, member_user: User, trainer_headers
    ):
        payment = PaymentFactory.paid(member_id=member_user.id)
        db_session.add(payment)
        await db_session.commit()

        response = await client.patch(
            f"/api/payments/{payment.id}/status",
            headers=trainer_headers,
            json={"status": "pending"},
        )

        data = response.json()["data"]
        assert data["status"] == "pending"
        assert data["paid_date"] is None

    async def test_member_cannot_change_status(
        self, client: AsyncClient, db_session: AsyncSession, member_user: User, member_headers
    ):
        payment = PaymentFactory.build(member_id=member_user.id)
        db_session.add(payment)
        await db_session.commit()

        response = await client.patch(
            f"/api/payments/{payment.id}/status",
            headers=member_headers,
            json={"status": "paid"},
        )

        assert response.status_code == 403


class TestVisibility:
    async def test_member_sees_only_own_payments(
        self, client: AsyncClient, db_session: AsyncSession, member_user: User, member_headers
    ):
        other = UserFactory.build(email="other@example.com")
        db_session.add(other)
        await db_session.flush()
        mine = PaymentFactory.build(member_id=member_user.id)
        theirs = PaymentFactory.build(member_id=other.id)
        db_session.add_all([mine, theirs])
        await db_session.commit()

        listing = await client.get(
            f"/api/payments?member_id={other.id}", headers=member_headers
        )
        forbidden = await client.get(f"/api/payments/{theirs.id}", headers=member_headers)

        assert [p["id"] for p in listing.json()["data"]] == [str(mine.id)]
        assert forbidden.status_code == 403

    async def test_only_admin_deletes(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        member_user: User,
        trainer_headers,
        admin_headers,
    ):
        payment = PaymentFactory.build(member_id=member_user.id)
        db_session.add(payment)
        await db_session.commit()

        as_trainer = await client.delete(f"/api/payments/{payment.id}", headers=trainer_headers)
        as_admin = await client.delete(f"/api/payments/{payment.id}", headers=admin_headers)

        assert as_trainer.status_code == 403
        assert as_admin.status_code == 200


async def test_summary_totals(
    client: AsyncClient, db_session: AsyncSession, member_user: User, trainer_headers
):
    db_session.add_all(
        [
            PaymentFactory.paid(member_id=member_user.id, amount=100.0),
            PaymentFactory.paid(member_id=member_user.id, amount=50.0),
            PaymentFactory.build(member_id=member_user.id, amount=30.0),
            PaymentFactory.past_due(member_id=member_user.id, amount=20.0),
            PaymentFactory.paid(
                member_id=member_user.id, amount=999.0, paid_date=datetime(2001, 1, 1)
            ),
        ]
    )
    await db_session.commit()

    response = await client.get("/api/payments/stats/summary", headers=trainer_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["by_status"]["paid"] == {"count": 3, "amount": 1149.0}
    assert data["by_status"]["overdue"] == {"count": 1, "amount": 20.0}
    assert data["by_status"]["cancelled"] == {"count": 0, "amount": 0.0}
    assert data["total_pending"] == 30.0
    assert data["monthly_revenue"] == 150.0
