from __future__ import annotations

from pydantic import BaseModel


class OverviewStats(BaseModel):
    total_brands: int
    total_links: int
    active_links: int
    total_events: int
    total_clicks: int
    window_days: int


class DailyCount(BaseModel):
    date: str
    count: int


class CountryCount(BaseModel):
    country: str
    count: int


class EventTypeCount(BaseModel):
    type: str
    count: int
