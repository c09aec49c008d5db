from __future__ import annotations

from typing import Any, Iterable, Optional

from linkdash.core.config import Settings

# Brands are registered by a row carrying this sort key; it is never a real link.
PLACEHOLDER_UUID = "_placeholder"


def placeholder_item(brand: str, *, created_at: str, created_by: str = "dashboard") -> dict[str, Any]:
    return {
        "brand": brand,
        "UUID": PLACEHOLDER_UUID,
        "created_at": created_at,
        "created_by": created_by,
        "real_url": "",
        "short_url": "",
        "link_status": "inactive",
        "metadata": {
            "placeholder": True,
            "description": "Brand placeholder entry",
        },
    }


def project(item: dict[str, Any], fields: Optional[Iterable[str]]) -> dict[str, Any]:
    if not fields:
        return item
    return {f: item[f] for f in fields if f in item}


class DashboardStore:
    """Storage collaborator for brands, links and raw analytics events.

    Events are written by the capture pipeline; the dashboard only reads them.
    Implementations wrap driver failures in ``StorageError``.
    """

    def scan_events(self, limit: Optional[int] = None, fields: Optional[Iterable[str]] = None) -> list[dict[str, Any]]:
        """Best-effort snapshot of raw events, at most ``limit`` items, unordered."""
        raise NotImplementedError

    def query_session_events(self, tracking_id: str) -> list[dict[str, Any]]:
        """All events of one tracking id, oldest first."""
        raise NotImplementedError

    def events_by_brand(self, brand: str, limit: int = 100) -> list[dict[str, Any]]:
        raise NotImplementedError

    def events_by_link(self, link_uuid: str, limit: int = 100) -> list[dict[str, Any]]:
        raise NotImplementedError

    def events_since(self, since: str, event_type: Optional[str] = None) -> list[dict[str, Any]]:
        raise NotImplementedError

    def count_events(self, since: str, event_type: Optional[str] = None) -> int:
        raise NotImplementedError

    def list_brands(self) -> list[str]:
        raise NotImplementedError

    def create_brand(self, name: str, *, created_at: str, created_by: str = "dashboard") -> None:
        """Register ``name``; raises ``BrandExistsError`` when it is already known."""
        raise NotImplementedError

    def list_brand_links(self, brand: str) -> list[dict[str, Any]]:
        """Every row of the brand, placeholder included."""
        raise NotImplementedError

    def get_brand_link(self, brand: str, uuid: str) -> Optional[dict[str, Any]]:
        raise NotImplementedError

    def delete_brand_link(self, brand: str, uuid: str) -> None:
        raise NotImplementedError

    def count_links(self, status: Optional[str] = None) -> int:
        """Number of real (non-placeholder) links, optionally with one status."""
        raise NotImplementedError


def build_store(settings: Settings) -> DashboardStore:
    if settings.storage_backend == "sql":
        from linkdash.infrastructure.sql_store import SqlStore

        return SqlStore.from_url(settings.database_url)

    from linkdash.infrastructure.dynamodb import DynamoDBStore

    return DynamoDBStore.from_settings(settings)
