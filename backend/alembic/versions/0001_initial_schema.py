"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the Workforce Lodging Platform:
employers, hotels, app_users, room_requests, extension_requests, event_log.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- employers ---
    op.create_table(
        "employers",
        sa.Column("employer_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("notes", sa.String(1000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- hotels ---
    op.create_table(
        "hotels",
        sa.Column("hotel_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- app_users ---
    op.create_table(
        "app_users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="EMPLOYER"),
        sa.Column("employer_id", sa.String(36), sa.ForeignKey("employers.employer_id"), nullable=True),
        sa.Column("hotel_id", sa.String(36), sa.ForeignKey("hotels.hotel_id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- room_requests ---
    op.create_table(
        "room_requests",
        sa.Column("request_id", sa.String(36), primary_key=True),
        sa.Column("employer_id", sa.String(36), sa.ForeignKey("employers.employer_id"), nullable=False),
        sa.Column("hotel_id", sa.String(36), sa.ForeignKey("hotels.hotel_id"), nullable=False),
        sa.Column("stay_start", sa.Date, nullable=False),
        sa.Column("stay_end", sa.Date, nullable=False),
        sa.Column("headcount", sa.Integer, nullable=False),
        sa.Column("room_type_mix", sa.JSON, nullable=False),
        sa.Column("notes", sa.String(1000), nullable=True),
        sa.Column("decision_note", sa.String(1000), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="SUBMITTED"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("stay_end > stay_start", name="ck_room_requests_stay_window"),
        sa.CheckConstraint("headcount >= 1", name="ck_room_requests_headcount"),
    )
    op.create_index("ix_room_requests_employer_id", "room_requests", ["employer_id"])

    # --- extension_requests ---
    op.create_table(
        "extension_requests",
        sa.Column("extension_id", sa.String(36), primary_key=True),
        sa.Column("request_id", sa.String(36), sa.ForeignKey("room_requests.request_id"), nullable=False),
        sa.Column("week_start", sa.Date, nullable=False),
        sa.Column("week_end", sa.Date, nullable=False),
        sa.Column("scope", sa.String(500), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="SUBMITTED"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_extension_requests_request_id", "extension_requests", ["request_id"])

    # --- event_log ---
    op.create_table(
        "event_log",
        sa.Column("entry_id", sa.String(36), primary_key=True),
        sa.Column("obj_type", sa.String(50), nullable=False),
        sa.Column("obj_id", sa.String(36), nullable=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("actor_id", sa.String(36), nullable=False),
        sa.Column("actor_role", sa.String(20), nullable=False),
        sa.Column("payload", sa.JSON, nullable=False),
        sa.Column("ts", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_event_log_obj_id", "event_log", ["obj_id"])


def downgrade() -> None:
    op.drop_index("ix_event_log_obj_id", table_name="event_log")
    op.drop_table("event_log")
    op.drop_index("ix_extension_requests_request_id", table_name="extension_requests")
    op.drop_table("extension_requests")
    op.drop_index("ix_room_requests_employer_id", table_name="room_requests")
    op.drop_table("room_requests")
    op.drop_table("app_users")
    op.drop_table("hotels")
    op.drop_table("employers")
