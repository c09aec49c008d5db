from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from linkdash.infrastructure.db import Base


class AnalyticsEventRow(Base):
    __tablename__ = "analytics_events"

    event_uuid: Mapped[str] = mapped_column(String(64), primary_key=True)
    tracking_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    # ISO-8601 text, compared lexically like the DynamoDB sort key
    timestamp: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    brand: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    link_uuid: Mapped[str | None] = mapped_column(String(64), nullable=True)
    event_type: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    visitor_ip: Mapped[str | None] = mapped_column(String(64), nullable=True)
    country: Mapped[str | None] = mapped_column(String(64), nullable=True)
    # Full record as written by the capture pipeline
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        Index("ix_analytics_events_tracking_id_timestamp", "tracking_id", "timestamp"),
        Index("ix_analytics_events_brand_timestamp", "brand", "timestamp"),
        Index("ix_analytics_events_link_uuid_timestamp", "link_uuid", "timestamp"),
    )

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "AnalyticsEventRow":
        return cls(
            event_uuid=str(item["event_uuid"]),
            tracking_id=str(item.get("tracking_id") or ""),
            timestamp=str(item.get("timestamp") or ""),
            brand=str(item.get("brand") or ""),
            link_uuid=item.get("link_uuid"),
            event_type=str(item.get("event_type") or ""),
            visitor_ip=item.get("visitor_ip"),
            country=item.get("country"),
            payload=dict(item),
        )

    def to_item(self) -> dict[str, Any]:
        return dict(self.payload or {})
