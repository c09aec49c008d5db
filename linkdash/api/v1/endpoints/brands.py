from __future__ import annotations

from fastapi import APIRouter, Depends

from linkdash.core.dependencies import get_store
from linkdash.infrastructure.store import DashboardStore
from linkdash.schemas.brands import BrandCreate, BrandCreateResponse, BrandSummary
from linkdash.services import brands as brand_service

router = APIRouter(prefix="/brands", tags=["brands"])


@router.get("", response_model=list[BrandSummary])
def list_brands(store: DashboardStore = Depends(get_store)):
    return brand_service.list_brand_summaries(store)


@router.post("", response_model=BrandCreateResponse, status_code=201)
def create_brand(payload: BrandCreate, store: DashboardStore = Depends(get_store)):
    brand = brand_service.create_brand(store, payload.name)
    return BrandCreateResponse(brand=brand)
