"""Initial schema

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _string(length: int) -> sqlmodel.sql.sqltypes.AutoString:
    return sqlmodel.sql.sqltypes.AutoString(length=length)


def upgrade() -> None:
    # 1. Users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("first_name", _string(100), nullable=False),
        sa.Column("last_name", _string(100), nullable=False),
        sa.Column("email", _string(255), nullable=False),
        sa.Column("hashed_password", _string(255), nullable=False),
        sa.Column("role", _string(20), nullable=False, server_default="member"),
        sa.Column("phone", _string(50), nullable=True),
        sa.Column("emergency_contact_name", _string(200), nullable=True),
        sa.Column("emergency_contact_phone", _string(50), nullable=True),
        sa.Column("emergency_contact_relationship", _string(100), nullable=True),
        sa.Column("membership_tier", _string(20), nullable=False, server_default="basic"),
        sa.Column("notes", _string(2000), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_is_active", "users", ["is_active"])
    op.create_index("ix_users_created_at", "users", ["created_at"])

    # 2. Horses
    op.create_table(
        "horses",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", _string(100), nullable=False),
        sa.Column("breed", _string(100), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("gender", _string(20), nullable=False),
        sa.Column("color", _string(50), nullable=False),
        sa.Column("markings", _string(500), nullable=True),
        sa.Column("owner_id", sa.Uuid(), nullable=True),
        sa.Column("boarding_type", _string(20), nullable=False, server_default="full"),
        sa.Column("stall_number", _string(20), nullable=True),
        sa.Column("medical_notes", _string(2000), nullable=True),
        sa.Column("dietary_restrictions", _string(1000), nullable=True),
        sa.Column("last_vet_visit", sa.DateTime(), nullable=True),
        sa.Column("next_vet_visit", sa.DateTime(), nullable=True),
        sa.Column("vaccination_status", _string(20), nullable=False, server_default="current"),
        sa.Column("insurance_info", _string(500), nullable=True),
        sa.Column("registration_number", _string(100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_horses_name", "horses", ["name"])
    op.create_index("ix_horses_breed", "horses", ["breed"])
    op.create_index("ix_horses_owner_id", "horses", ["owner_id"])
    op.create_index("ix_horses_boarding_type", "horses", ["boarding_type"])
    op.create_index("ix_horses_stall_number", "horses", ["stall_number"])
    op.create_index("ix_horses_is_active", "horses", ["is_active"])
    op.create_index("ix_horses_created_at", "horses", ["created_at"])

    # 3. Lessons
    op.create_table(
        "lessons",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", _string(200), nullable=False),
        sa.Column("description", _string(2000), nullable=True),
        sa.Column("instructor_id", sa.Uuid(), nullable=False),
        sa.Column("member_id", sa.Uuid(), nullable=False),
        sa.Column("horse_id", sa.Uuid(), nullable=True),
        sa.Column("scheduled_date", sa.DateTime(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("lesson_type", _string(20), nullable=False, server_default="private"),
        sa.Column("status", _string(20), nullable=False, server_default="scheduled"),
        sa.Column("cost", sa.Float(), nullable=False, server_default="0"),
        sa.Column("payment_status", _string(20), nullable=False, server_default="pending"),
        sa.Column("notes", _string(2000), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["instructor_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["member_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["horse_id"], ["horses.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_lessons_instructor_id", "lessons", ["instructor_id"])
    op.create_index("ix_lessons_member_id", "lessons", ["member_id"])
    op.create_index("ix_lessons_horse_id", "lessons", ["horse_id"])
    op.create_index("ix_lessons_scheduled_date", "lessons", ["scheduled_date"])
    op.create_index("ix_lessons_status", "lessons", ["status"])
    op.create_index("ix_lessons_is_active", "lessons", ["is_active"])
    op.create_index("ix_lessons_created_at", "lessons", ["created_at"])
    # Conflict check: one instructor's active lessons by start time
    op.create_index(
        "ix_lessons_instructor_schedule",
        "lessons",
        ["instructor_id", "scheduled_date"],
    )

    # 4. Events
    op.create_table(
        "events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", _string(200), nullable=False),
        sa.Column("description", _string(2000), nullable=True),
        sa.Column("event_type", _string(20), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("location", _string(200), nullable=True),
        sa.Column("max_participants", sa.Integer(), nullable=True),
        sa.Column("registration_fee", sa.Float(), nullable=False, server_default="0"),
        sa.Column("organizer_id", sa.Uuid(), nullable=False),
        sa.Column("status", _string(20), nullable=False, server_default="upcoming"),
        sa.Column("requirements", _string(2000), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["organizer_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_events_event_type", "events", ["event_type"])
    op.create_index("ix_events_start_date", "events", ["start_date"])
    op.create_index("ix_events_organizer_id", "events", ["organizer_id"])
    op.create_index("ix_events_status", "events", ["status"])
    op.create_index("ix_events_is_active", "events", ["is_active"])
    op.create_index("ix_events_created_at", "events", ["created_at"])

    # 5. Event participants and waitlist
    op.create_table(
        "event_participants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("event_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("registered_at", sa.DateTime(), nullable=False),
        sa.Column("payment_status", _string(20), nullable=False, server_default="pending"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("event_id", "user_id", name="uq_event_participant"),
    )
    op.create_index("ix_event_participants_event_id", "event_participants", ["event_id"])
    op.create_index("ix_event_participants_user_id", "event_participants", ["user_id"])

    op.create_table(
        "event_waitlist",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("event_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("added_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("event_id", "user_id", name="uq_event_waitlist"),
    )
    op.create_index("ix_event_waitlist_event_id", "event_waitlist", ["event_id"])
    op.create_index("ix_event_waitlist_user_id", "event_waitlist", ["user_id"])

    # 6. Equipment
    op.create_table(
        "equipment",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", _string(200), nullable=False),
        sa.Column("category", _string(20), nullable=False),
        sa.Column("brand", _string(100), nullable=True),
        sa.Column("model", _string(100), nullable=True),
        sa.Column("size", _string(50), nullable=True),
        sa.Column("condition", _string(20), nullable=False, server_default="good"),
        sa.Column("purchase_date", sa.DateTime(), nullable=True),
        sa.Column("cost", sa.Float(), nullable=True),
        sa.Column("current_value", sa.Float(), nullable=True),
        sa.Column("assigned_horse_id", sa.Uuid(), nullable=True),
        sa.Column("last_maintenance", sa.DateTime(), nullable=True),
        sa.Column("next_maintenance", sa.DateTime(), nullable=True),
        sa.Column("maintenance_notes", _string(2000), nullable=True),
        sa.Column("location", _string(200), nullable=True),
        sa.Column("notes", _string(2000), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["assigned_horse_id"], ["horses.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_equipment_name", "equipment", ["name"])
    op.create_index("ix_equipment_category", "equipment", ["category"])
    op.create_index("ix_equipment_condition", "equipment", ["condition"])
    op.create_index("ix_equipment_assigned_horse_id", "equipment", ["assigned_horse_id"])
    op.create_index("ix_equipment_is_active", "equipment", ["is_active"])

    # 7. Payments
    op.create_table(
        "payments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("member_id", sa.Uuid(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("payment_type", _string(20), nullable=False),
        sa.Column("payment_method", _string(20), nullable=False),
        sa.Column("status", _string(20), nullable=False, server_default="pending"),
        sa.Column("due_date", sa.DateTime(), nullable=False),
        sa.Column("paid_date", sa.DateTime(), nullable=True),
        sa.Column("invoice_number", _string(64), nullable=False),
        sa.Column("description", _string(1000), nullable=True),
        sa.Column("reference_type", _string(20), nullable=True),
        sa.Column("reference_id", sa.Uuid(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["member_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_payments_member_id", "payments", ["member_id"])
    op.create_index("ix_payments_payment_type", "payments", ["payment_type"])
    op.create_index("ix_payments_status", "payments", ["status"])
    op.create_index("ix_payments_due_date", "payments", ["due_date"])
    op.create_index("ix_payments_paid_date", "payments", ["paid_date"])
    op.create_index("ix_payments_invoice_number", "payments", ["invoice_number"], unique=True)
    op.create_index("ix_payments_created_at", "payments", ["created_at"])


def downgrade() -> None:
    op.drop_table("payments")
    op.drop_table("equipment")
    op.drop_table("event_waitlist")
    op.drop_table("event_participants")
    op.drop_table("events")
    op.drop_table("lessons")
    op.drop_table("horses")
    op.drop_table("users")
