"""create brand links and analytics events tables

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7e40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "brand_links",
        sa.Column("brand", sa.String(length=100), nullable=False),
        sa.Column("UUID", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.String(length=64), nullable=False),
        sa.Column("created_by", sa.String(length=200), nullable=False),
        sa.Column("real_url", sa.String(length=2048), nullable=False),
        sa.Column("short_url", sa.String(length=512), nullable=False),
        sa.Column("link_status", sa.String(length=16), nullable=False),
        sa.Column("campaign_id", sa.String(length=200), nullable=True),
        sa.Column("source", sa.String(length=200), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("brand", "UUID"),
    )
    op.create_index(op.f("ix_brand_links_link_status"), "brand_links", ["link_status"], unique=False)

    op.create_table(
        "analytics_events",
        sa.Column("event_uuid", sa.String(length=64), nullable=False),
        sa.Column("tracking_id", sa.String(length=128), nullable=False),
        sa.Column("timestamp", sa.String(length=64), nullable=False),
        sa.Column("brand", sa.String(length=100), nullable=False),
        sa.Column("link_uuid", sa.String(length=64), nullable=True),
        sa.Column("event_type", sa.String(length=64), nullable=False),
        sa.Column("visitor_ip", sa.String(length=64), nullable=True),
        sa.Column("country", sa.String(length=64), nullable=True),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("event_uuid"),
    )
    op.create_index(op.f("ix_analytics_events_tracking_id"), "analytics_events", ["tracking_id"], unique=False)
    op.create_index("ix_analytics_events_tracking_id_timestamp", "analytics_events", ["tracking_id", "timestamp"], unique=False)
    op.create_index("ix_analytics_events_brand_timestamp", "analytics_events", ["brand", "timestamp"], unique=False)
    op.create_index("ix_analytics_events_link_uuid_timestamp", "analytics_events", ["link_uuid", "timestamp"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_analytics_events_link_uuid_timestamp", table_name="analytics_events")
    op.drop_index("ix_analytics_events_brand_timestamp", table_name="analytics_events")
    op.drop_index("ix_analytics_events_tracking_id_timestamp", table_name="analytics_events")
    op.drop_index(op.f("ix_analytics_events_tracking_id"), table_name="analytics_events")
    op.drop_table("analytics_events")
    op.drop_index(op.f("ix_brand_links_link_status"), table_name="brand_links")
    op.drop_table("brand_links")
