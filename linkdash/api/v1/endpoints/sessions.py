from __future__ import annotations

import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query

from linkdash.core.config import Settings
from linkdash.core.dependencies import get_app_settings, get_store
from linkdash.infrastructure.store import DashboardStore
from linkdash.schemas.events import AnalyticsEvent, EventSession, SessionsPage, VisitorsPage
from linkdash.services.aggregation import GroupBy, aggregate, group_by_tracking_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sessions"])


def _to_events(items: list[dict]) -> list[AnalyticsEvent]:
    return [AnalyticsEvent.model_validate(i) for i in items]


@router.get("/sessions", response_model=Union[SessionsPage, VisitorsPage])
def list_sessions(
    limit: int = Query(50, ge=1, le=500),
    page: int = Query(1, ge=1),
    group_by: GroupBy = Query(GroupBy.tracking_id, alias="groupBy"),
    store: DashboardStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    # Totals only cover the scanned snapshot unless the exhaustive scan is enabled
    scan_limit = None if settings.sessions_scan_exhaustive else settings.sessions_scan_limit
    raw = store.scan_events(limit=scan_limit)
    result = aggregate(_to_events(raw), group_by, limit=limit, offset=(page - 1) * limit)
    logger.debug(
        "Aggregated %d events into %d %s groups (page=%d limit=%d)",
        len(raw), result.total, result.group_by.value, page, limit,
    )
    if result.group_by is GroupBy.visitor_ip:
        return VisitorsPage(visitors=result.items, total=result.total)
    return SessionsPage(sessions=result.items, total=result.total)


@router.get("/sessions/{tracking_id}", response_model=EventSession)
def get_session(tracking_id: str, store: DashboardStore = Depends(get_store)):
    sessions = group_by_tracking_id(_to_events(store.query_session_events(tracking_id)))
    if not sessions:
        raise HTTPException(status_code=404, detail="Session not found")
    return sessions[0]


@router.get("/events", response_model=list[AnalyticsEvent])
def list_events(
    brand: Optional[str] = Query(None, min_length=1),
    link_uuid: Optional[str] = Query(None, min_length=1),
    limit: int = Query(100, ge=1, le=1000),
    store: DashboardStore = Depends(get_store),
):
    if (brand is None) == (link_uuid is None):
        raise HTTPException(status_code=400, detail="Exactly one of brand or link_uuid is required")
    if brand is not None:
        return _to_events(store.events_by_brand(brand, limit))
    return _to_events(store.events_by_link(link_uuid, limit))
