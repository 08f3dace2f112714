"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates the users, venues, events and rsvps tables. Every primary key is a
short random code assigned by the application.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

rsvp_status = sa.Enum("pending", "yes", "no", name="rsvpstatus")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(8), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False, server_default=""),
        sa.Column("picture", sa.String(512), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # --- venues ---
    op.create_table(
        "venues",
        sa.Column("id", sa.String(8), primary_key=True),
        sa.Column("user_id", sa.String(8), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("address", sa.String(500), nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("capacity", sa.Integer, nullable=False, server_default="0"),
        sa.Column("phone", sa.String(50), nullable=False, server_default=""),
        sa.Column("email", sa.String(255), nullable=False, server_default=""),
        sa.Column("website", sa.String(500), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_venues_user_id", "venues", ["user_id"])

    # --- events ---
    op.create_table(
        "events",
        sa.Column("id", sa.String(8), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("start_time", sa.DateTime, nullable=False),
        sa.Column("end_time", sa.DateTime, nullable=False),
        sa.Column("user_id", sa.String(8), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("venue_id", sa.String(8), sa.ForeignKey("venues.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_events_user_id", "events", ["user_id"])

    # --- rsvps ---
    op.create_table(
        "rsvps",
        sa.Column("id", sa.String(8), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("status", rsvp_status, nullable=False, server_default="pending"),
        sa.Column("extra_guests", sa.Integer, nullable=False, server_default="0"),
        sa.Column("event_id", sa.String(8), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("extra_guests >= 0 AND extra_guests <= 4", name="ck_rsvps_extra_guests_range"),
    )
    op.create_index("ix_rsvps_event_id", "rsvps", ["event_id"])


def downgrade() -> None:
    op.drop_index("ix_rsvps_event_id", table_name="rsvps")
    op.drop_table("rsvps")
    op.drop_index("ix_events_user_id", table_name="events")
    op.drop_table("events")
    op.drop_index("ix_venues_user_id", table_name="venues")
    op.drop_table("venues")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    rsvp_status.drop(op.get_bind(), checkfirst=True)
