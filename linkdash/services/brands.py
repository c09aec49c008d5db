from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from linkdash.core.errors import BrandExistsError, NotFoundError
from linkdash.infrastructure.store import PLACEHOLDER_UUID, DashboardStore
from linkdash.schemas.brands import BrandSummary
from linkdash.schemas.links import BrandLinkOut
from linkdash.services.aggregation import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

UTC = timezone.utc

LINK_STATUSES = ("active", "inactive", "expired")


def iso_now() -> str:
    return format_timestamp(datetime.now(UTC))


def real_links(items: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    return [i for i in items if i.get("UUID") != PLACEHOLDER_UUID]


def summarize_brand(name: str, links: Iterable[dict[str, Any]]) -> BrandSummary:
    summary = BrandSummary(name=name)
    for link in real_links(links):
        summary.total += 1
        status = link.get("link_status")
        if status in LINK_STATUSES:
            setattr(summary, status, getattr(summary, status) + 1)
    return summary


def link_out(item: dict[str, Any]) -> BrandLinkOut:
    return BrandLinkOut(
        brand=item.get("brand", ""),
        uuid=item.get("UUID", ""),
        created_at=item.get("created_at", ""),
        created_by=item.get("created_by", ""),
        real_url=item.get("real_url", ""),
        short_url=item.get("short_url", ""),
        link_status=item.get("link_status", ""),
        campaign_id=item.get("campaign_id"),
        source=item.get("source"),
        metadata=item.get("metadata"),
    )


def list_brand_summaries(store: DashboardStore) -> list[BrandSummary]:
    return [summarize_brand(b, store.list_brand_links(b)) for b in store.list_brands()]


def create_brand(store: DashboardStore, name: str) -> BrandSummary:
    if name in store.list_brands():
        raise BrandExistsError()
    store.create_brand(name, created_at=iso_now())
    logger.info("Brand created name=%s", name)
    return BrandSummary(name=name)


def list_links(store: DashboardStore, brand: Optional[str] = None) -> list[BrandLinkOut]:
    brands = [brand] if brand else store.list_brands()
    items: list[dict[str, Any]] = []
    for b in brands:
        items.extend(real_links(store.list_brand_links(b)))
    items.sort(key=lambda i: parse_timestamp(i.get("created_at")), reverse=True)
    return [link_out(i) for i in items]


def get_link(store: DashboardStore, brand: str, uuid: str) -> BrandLinkOut:
    item = store.get_brand_link(brand, uuid) if uuid != PLACEHOLDER_UUID else None
    if not item:
        raise NotFoundError("Link not found")
    return link_out(item)


def delete_link(store: DashboardStore, brand: str, uuid: str) -> None:
    get_link(store, brand, uuid)
    store.delete_brand_link(brand, uuid)
    logger.info("Link deleted brand=%s uuid=%s", brand, uuid)
