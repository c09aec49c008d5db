"""Group raw analytics events into sessions or visitors and paginate them.

Everything here is a pure function of its input: no I/O, no shared state, so
concurrent requests can call it freely. Callers fetch the event snapshot from
the store and hand the result straight to the response.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Iterable, Sequence, TypeVar, Union

from linkdash.schemas.events import AnalyticsEvent, EventSession, VisitorSession

UTC = timezone.utc

# Unparseable or missing timestamps sort as the Unix epoch.
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

T = TypeVar("T")


class GroupBy(str, Enum):
    tracking_id = "tracking_id"
    visitor_ip = "visitor_ip"


@dataclass
class AggregationPage:
    group_by: GroupBy
    items: list[Union[EventSession, VisitorSession]]
    total: int


@dataclass
class _Span:
    events: list[AnalyticsEvent]
    first: AnalyticsEvent
    last: AnalyticsEvent
    duration_seconds: float


def parse_timestamp(value: object) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are UTC, garbage is the epoch."""
    if not value:
        return EPOCH
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Render as ``2024-01-01T00:00:00.000Z``, the shape the capture pipeline writes."""
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _span(events: Iterable[AnalyticsEvent]) -> _Span:
    ordered = sorted(events, key=lambda e: (parse_timestamp(e.timestamp), e.event_uuid))
    first, last = ordered[0], ordered[-1]
    duration = (parse_timestamp(last.timestamp) - parse_timestamp(first.timestamp)).total_seconds()
    return _Span(events=ordered, first=first, last=last, duration_seconds=duration)


def _bucket(events: Iterable[AnalyticsEvent], key: Callable[[AnalyticsEvent], str | None]) -> dict[str, list[AnalyticsEvent]]:
    buckets: dict[str, list[AnalyticsEvent]] = {}
    for event in events:
        k = key(event)
        if k is None:
            continue
        buckets.setdefault(k, []).append(event)
    return buckets


def _dedupe(values: Iterable[str | None]) -> list[str]:
    seen: dict[str, None] = {}
    for v in values:
        if v and v not in seen:
            seen[v] = None
    return list(seen)


def _visitor_key(event: AnalyticsEvent) -> str | None:
    ip = (event.visitor_ip or "").strip()
    return ip or None


def group_by_tracking_id(events: Iterable[AnalyticsEvent]) -> list[EventSession]:
    """One session per tracking id, most recent ``first_event`` first."""
    sessions: list[tuple[datetime, EventSession]] = []
    for tracking_id, bucket in _bucket(events, lambda e: e.tracking_id).items():
        span = _span(bucket)
        head = span.first
        session = EventSession(
            tracking_id=tracking_id,
            brand=head.brand,
            event_count=len(span.events),
            first_event=head.timestamp,
            last_event=span.last.timestamp,
            duration_seconds=span.duration_seconds,
            country=head.country,
            city=head.city,
            user_agent=head.user_agent,
            visitor_ip=head.visitor_ip,
            events=span.events,
        )
        sessions.append((parse_timestamp(head.timestamp), session))

    sessions.sort(key=lambda pair: pair[1].tracking_id)
    sessions.sort(key=lambda pair: pair[0], reverse=True)
    return [s for _, s in sessions]


def group_by_visitor_ip(events: Iterable[AnalyticsEvent]) -> list[VisitorSession]:
    """One entry per non-empty visitor IP, most active visitor first."""
    visitors: list[VisitorSession] = []
    for ip, bucket in _bucket(events, _visitor_key).items():
        span = _span(bucket)
        head = span.first
        visitors.append(
            VisitorSession(
                visitor_ip=ip,
                total_events=len(span.events),
                tracking_ids=_dedupe(e.tracking_id for e in span.events),
                brands=_dedupe(e.brand for e in span.events),
                first_seen=head.timestamp,
                last_seen=span.last.timestamp,
                duration_seconds=span.duration_seconds,
                country=head.country,
                city=head.city,
                region=head.region,
                events=span.events,
            )
        )

    visitors.sort(key=lambda v: v.visitor_ip)
    visitors.sort(key=lambda v: v.total_events, reverse=True)
    return visitors


_GROUPERS: dict[GroupBy, Callable[[Iterable[AnalyticsEvent]], list]] = {
    GroupBy.tracking_id: group_by_tracking_id,
    GroupBy.visitor_ip: group_by_visitor_ip,
}


def paginate(items: Sequence[T], *, offset: int, limit: int) -> tuple[list[T], int]:
    """Return ``(page, total)``; an offset past the end yields an empty page."""
    if limit <= 0:
        raise ValueError("limit must be positive")
    if offset < 0:
        raise ValueError("offset must be non-negative")
    total = len(items)
    start = min(offset, total)
    return list(items[start:start + limit]), total


def aggregate(
    events: Iterable[AnalyticsEvent],
    group_by: GroupBy,
    *,
    limit: int,
    offset: int = 0,
) -> AggregationPage:
    grouped = _GROUPERS[GroupBy(group_by)](events)
    page, total = paginate(grouped, offset=offset, limit=limit)
    return AggregationPage(group_by=GroupBy(group_by), items=page, total=total)
