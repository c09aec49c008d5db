from __future__ import annotations

from typing import Any

from pydantic import AnyHttpUrl, BaseModel, Field, TypeAdapter, ValidationError, field_validator

_http_url = TypeAdapter(AnyHttpUrl)


class LinkCreate(BaseModel):
    # Checked as an http(s) URL but forwarded exactly as entered
    real_url: str = Field(min_length=1, max_length=2048)
    brand: str = Field(min_length=1, max_length=100)
    created_by: str = Field(min_length=1, max_length=200)
    campaign_id: str | None = None
    source: str | None = None
    metadata: Any = None

    @field_validator("real_url")
    @classmethod
    def _check_url(cls, v: str) -> str:
        try:
            _http_url.validate_python(v)
        except ValidationError:
            raise ValueError("real_url must be an absolute http(s) URL")
        return v


class BrandLinkOut(BaseModel):
    brand: str
    uuid: str
    created_at: str
    created_by: str
    real_url: str
    short_url: str
    link_status: str
    campaign_id: str | None = None
    source: str | None = None
    metadata: Any = None
