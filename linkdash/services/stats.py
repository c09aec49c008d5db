from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Optional

from linkdash.infrastructure.store import DashboardStore
from linkdash.schemas.stats import CountryCount, DailyCount, EventTypeCount, OverviewStats
from linkdash.services.aggregation import format_timestamp

UTC = timezone.utc

CLICK_EVENT = "click"


def window_start(days: int, now: Optional[datetime] = None) -> datetime:
    """Midnight UTC ``days`` days before ``now``."""
    now = now or datetime.now(UTC)
    start = (now.astimezone(UTC) - timedelta(days=days)).date()
    return datetime(start.year, start.month, start.day, tzinfo=UTC)


def overview(store: DashboardStore, *, days: int = 30, now: Optional[datetime] = None) -> OverviewStats:
    since = format_timestamp(window_start(days, now))
    return OverviewStats(
        total_brands=len(store.list_brands()),
        total_links=store.count_links(),
        active_links=store.count_links(status="active"),
        total_events=store.count_events(since),
        total_clicks=store.count_events(since, event_type=CLICK_EVENT),
        window_days=days,
    )


def clicks_over_time(store: DashboardStore, *, days: int = 30, now: Optional[datetime] = None) -> list[DailyCount]:
    now = (now or datetime.now(UTC)).astimezone(UTC)
    buckets = {(now - timedelta(days=i)).date().isoformat(): 0 for i in range(days)}

    for event in store.events_since(format_timestamp(window_start(days, now)), event_type=CLICK_EVENT):
        day = str(event.get("timestamp") or "").split("T")[0]
        if day in buckets:
            buckets[day] += 1

    return [DailyCount(date=d, count=c) for d, c in sorted(buckets.items())]


def country_distribution(store: DashboardStore) -> list[CountryCount]:
    counts = Counter(e.get("country") or "unknown" for e in store.scan_events(fields=["country"]))
    return [CountryCount(country=k, count=v) for k, v in counts.most_common()]


def event_type_distribution(store: DashboardStore) -> list[EventTypeCount]:
    counts = Counter(e.get("event_type") or "unknown" for e in store.scan_events(fields=["event_type"]))
    return [EventTypeCount(type=k, count=v) for k, v in counts.most_common()]
