"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates the events, user_favorites and rsvps tables. RSVP and favorites
rows reference events by id only, so deleting an event leaves them behind.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

event_category = sa.Enum(
    "General", "Conference", "Workshop", "Meetup", "Social", "Sports", "Music", "Food",
    name="eventcategory",
)


def upgrade() -> None:
    # --- events ---
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("location", sa.String(500), nullable=False, server_default=""),
        sa.Column("category", event_category, nullable=False, server_default="General"),
        sa.Column("date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("owner_id", sa.String(128), nullable=False),
        sa.Column("attendees", sa.JSON, nullable=False),
        sa.Column("max_attendees", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_events_owner_id", "events", ["owner_id"])
    op.create_index("ix_events_created_at", "events", ["created_at"])

    # --- user_favorites ---
    op.create_table(
        "user_favorites",
        sa.Column("user_id", sa.String(128), primary_key=True),
        sa.Column("favorites", sa.JSON, nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    # --- rsvps ---
    op.create_table(
        "rsvps",
        sa.Column("user_id", sa.String(128), primary_key=True),
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="attending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("rsvps")
    op.drop_table("user_favorites")
    op.drop_index("ix_events_created_at", table_name="events")
    op.drop_index("ix_events_owner_id", table_name="events")
    op.drop_table("events")
    event_category.drop(op.get_bind(), checkfirst=True)
