from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from linkdash.core.config import Settings
from linkdash.core.dependencies import get_app_settings, get_store
from linkdash.infrastructure.store import DashboardStore
from linkdash.schemas.stats import CountryCount, DailyCount, EventTypeCount, OverviewStats
from linkdash.services import stats as stats_service

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/overview", response_model=OverviewStats)
def overview(store: DashboardStore = Depends(get_store), settings: Settings = Depends(get_app_settings)):
    return stats_service.overview(store, days=settings.stats_window_days)


@router.get("/clicks", response_model=list[DailyCount])
def clicks_over_time(days: int = Query(30, ge=1, le=365), store: DashboardStore = Depends(get_store)):
    return stats_service.clicks_over_time(store, days=days)


@router.get("/countries", response_model=list[CountryCount])
def countries(store: DashboardStore = Depends(get_store)):
    return stats_service.country_distribution(store)


@router.get("/event-types", response_model=list[EventTypeCount])
def event_types(store: DashboardStore = Depends(get_store)):
    return stats_service.event_type_distribution(store)
