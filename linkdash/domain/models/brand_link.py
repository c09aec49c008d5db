from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from linkdash.infrastructure.db import Base


class BrandLinkRow(Base):
    __tablename__ = "brand_links"

    brand: Mapped[str] = mapped_column(String(100), primary_key=True)
    uuid: Mapped[str] = mapped_column("UUID", String(64), primary_key=True)
    created_at: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    created_by: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    real_url: Mapped[str] = mapped_column(String(2048), nullable=False, default="")
    short_url: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    link_status: Mapped[str] = mapped_column(String(16), nullable=False, default="active", index=True)
    campaign_id: Mapped[str | None] = mapped_column(String(200), nullable=True)
    source: Mapped[str | None] = mapped_column(String(200), nullable=True)
    # "metadata" is reserved on declarative classes
    link_metadata: Mapped[Any] = mapped_column("metadata", JSON, nullable=True)

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "BrandLinkRow":
        return cls(
            brand=item["brand"],
            uuid=item["UUID"],
            created_at=item.get("created_at") or "",
            created_by=item.get("created_by") or "",
            real_url=item.get("real_url") or "",
            short_url=item.get("short_url") or "",
            link_status=item.get("link_status") or "active",
            campaign_id=item.get("campaign_id"),
            source=item.get("source"),
            link_metadata=item.get("metadata"),
        )

    def to_item(self) -> dict[str, Any]:
        item: dict[str, Any] = {
            "brand": self.brand,
            "UUID": self.uuid,
            "created_at": self.created_at,
            "created_by": self.created_by,
            "real_url": self.real_url,
            "short_url": self.short_url,
            "link_status": self.link_status,
        }
        if self.campaign_id is not None:
            item["campaign_id"] = self.campaign_id
        if self.source is not None:
            item["source"] = self.source
        if self.link_metadata is not None:
            item["metadata"] = self.link_metadata
        return item
