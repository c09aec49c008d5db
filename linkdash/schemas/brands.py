from __future__ import annotations

from pydantic import BaseModel, Field

BRAND_NAME_PATTERN = r"^[a-zA-Z0-9_-]+$"


class BrandCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100, pattern=BRAND_NAME_PATTERN)


class BrandSummary(BaseModel):
    name: str
    total: int = 0
    active: int = 0
    inactive: int = 0
    expired: int = 0


class BrandCreateResponse(BaseModel):
    success: bool = True
    brand: BrandSummary
