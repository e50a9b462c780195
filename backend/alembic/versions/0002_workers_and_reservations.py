"""workers_and_reservations

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19

Adds the employer worker roster and the reservations that place workers
into rooms.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- workers ---
    op.create_table(
        "workers",
        sa.Column("worker_id", sa.String(36), primary_key=True),
        sa.Column("employer_id", sa.String(36), sa.ForeignKey("employers.employer_id"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(40), nullable=True),
        sa.Column("notes", sa.String(1000), nullable=True),
        sa.Column("gov_id_type", sa.String(30), nullable=True),
        sa.Column("gov_id_last4", sa.String(4), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("employer_id", "phone", name="uq_workers_employer_phone"),
    )
    op.create_index("ix_workers_employer_id", "workers", ["employer_id"])

    # --- reservations ---
    op.create_table(
        "reservations",
        sa.Column("reservation_id", sa.String(36), primary_key=True),
        sa.Column("employer_id", sa.String(36), sa.ForeignKey("employers.employer_id"), nullable=False),
        sa.Column("hotel_id", sa.String(36), sa.ForeignKey("hotels.hotel_id"), nullable=False),
        sa.Column("request_id", sa.String(36), sa.ForeignKey("room_requests.request_id"), nullable=True),
        sa.Column("worker_id", sa.String(36), sa.ForeignKey("workers.worker_id"), nullable=True),
        sa.Column("worker_name", sa.String(200), nullable=False),
        sa.Column("room_no", sa.String(20), nullable=True),
        sa.Column("checkin_ts", sa.DateTime(timezone=True), nullable=True),
        sa.Column("checkout_ts", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_reservations_employer_id", "reservations", ["employer_id"])
    op.create_index("ix_reservations_worker_id", "reservations", ["worker_id"])


def downgrade() -> None:
    op.drop_index("ix_reservations_worker_id", table_name="reservations")
    op.drop_index("ix_reservations_employer_id", table_name="reservations")
    op.drop_table("reservations")
    op.drop_index("ix_workers_employer_id", table_name="workers")
    op.drop_table("workers")
