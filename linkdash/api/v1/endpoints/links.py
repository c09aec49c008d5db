from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from linkdash.core.dependencies import get_link_client, get_store
from linkdash.infrastructure.store import DashboardStore
from linkdash.schemas.links import BrandLinkOut, LinkCreate
from linkdash.services import brands as brand_service
from linkdash.services.links_api import LinkApiClient

router = APIRouter(prefix="/links", tags=["links"])


@router.get("", response_model=list[BrandLinkOut])
def list_links(
    brand: Optional[str] = Query(None, min_length=1, description="Only links of this brand"),
    store: DashboardStore = Depends(get_store),
):
    return brand_service.list_links(store, brand)


@router.post("", status_code=201)
def create_link(payload: LinkCreate, client: LinkApiClient = Depends(get_link_client)):
    # Upstream JSON is returned untouched
    return client.create_link(payload.model_dump(mode="json", exclude_none=True))


@router.get("/{brand}/{uuid}", response_model=BrandLinkOut)
def get_link(brand: str, uuid: str, store: DashboardStore = Depends(get_store)):
    return brand_service.get_link(store, brand, uuid)


@router.delete("/{brand}/{uuid}", status_code=204)
def delete_link(brand: str, uuid: str, store: DashboardStore = Depends(get_store)):
    brand_service.delete_link(store, brand, uuid)
    return Response(status_code=204)
