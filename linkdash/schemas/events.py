from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class AnalyticsEvent(BaseModel):
    """One recorded interaction as deposited by the capture pipeline.

    Only the fields the dashboard reads are declared; everything else the
    pipeline writes (click coordinates, scroll depth, TLS details, ...) is kept
    as extra attributes and passed through untouched.
    """

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    tracking_id: str = ""
    timestamp: str = ""
    event_uuid: str = ""
    brand: str = ""
    link_uuid: str | None = None
    event_type: str = ""

    visitor_ip: str | None = None
    user_agent: str | None = None

    country: str | None = None
    city: str | None = None
    region: str | None = None
    timezone: str | None = None
    postal_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    url: str | None = None
    page_url: str | None = None
    page_path: str | None = None
    page_title: str | None = None
    referrer: str | None = None

    metadata: Any = None

    @field_validator("tracking_id", "timestamp", "event_uuid", "brand", "event_type", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class EventSession(BaseModel):
    tracking_id: str
    brand: str
    event_count: int
    first_event: str
    last_event: str
    duration_seconds: float
    country: str | None = None
    city: str | None = None
    user_agent: str | None = None
    visitor_ip: str | None = None
    events: list[AnalyticsEvent]


class VisitorSession(BaseModel):
    visitor_ip: str
    total_events: int
    tracking_ids: list[str]
    brands: list[str]
    first_seen: str
    last_seen: str
    duration_seconds: float
    country: str | None = None
    city: str | None = None
    region: str | None = None
    events: list[AnalyticsEvent]


class SessionsPage(BaseModel):
    sessions: list[EventSession]
    total: int


class VisitorsPage(BaseModel):
    visitors: list[VisitorSession]
    total: int
