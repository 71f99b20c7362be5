"""Tests for table definitions."""

import pytest
from sqlalchemy import DateTime

from src.crm.models import (
    Equipment,
    Event,
    EventParticipant,
    EventWaitlistEntry,
    Horse,
    Lesson,
    Payment,
    User,
)

pytestmark = pytest.mark.unit

TIMESTAMP_COLUMNS = {
    User: ["created_at", "updated_at"],
    Horse: ["last_vet_visit", "next_vet_visit", "created_at", "updated_at"],
    Lesson: ["scheduled_date", "created_at", "updated_at"],
    Event: ["start_date", "end_date", "created_at", "updated_at"],
    EventParticipant: ["registered_at"],
    EventWaitlistEntry: ["added_at"],
    Equipment: [
        "purchase_date",
        "last_maintenance",
        "next_maintenance",
        "created_at",
        "updated_at",
    ],
    Payment: ["due_date", "paid_date", "created_at", "updated_at"],
}


@pytest.mark.parametrize(
    ("model", "column_name"),
    [(model, name) for model, names in TIMESTAMP_COLUMNS.items() for name in names],
    ids=lambda value: getattr(value, "__name__", value),
)
def test_timestamps_stored_as_naive_utc(model, column_name: str):
    column = model.__table__.columns[column_name]

    assert type(column.type) is DateTime
    assert column.type.timezone is False
