from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from linkdash.core.config import Settings
from linkdash.core.errors import BrandExistsError, StorageError
from linkdash.infrastructure.store import PLACEHOLDER_UUID, DashboardStore, placeholder_item

logger = logging.getLogger(__name__)

BRAND_INDEX = "brand-timestamp-index"
LINK_INDEX = "link_uuid-timestamp-index"


def to_plain(value: Any) -> Any:
    """Replace boto3 ``Decimal`` numbers with ``int``/``float`` so items serialize as JSON numbers."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, set):
        return [to_plain(v) for v in sorted(value, key=str)]
    return value


def _projection(fields: Optional[Iterable[str]]) -> dict[str, Any]:
    if not fields:
        return {}
    names = {f"#p{i}": f for i, f in enumerate(fields)}
    return {"ProjectionExpression": ", ".join(names), "ExpressionAttributeNames": names}


class DynamoDBStore(DashboardStore):
    """DynamoDB backend: a brands table (``brand``/``UUID``) and an events table (``tracking_id``/``timestamp``)."""

    def __init__(self, brands_table: Any, events_table: Any) -> None:
        self._brands = brands_table
        self._events = events_table

    @classmethod
    def from_settings(cls, settings: Settings) -> "DynamoDBStore":
        resource = boto3.resource(
            "dynamodb",
            region_name=settings.aws_region,
            endpoint_url=settings.dynamodb_endpoint_url,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            config=Config(retries={"max_attempts": 3, "mode": "standard"}),
        )
        return cls(
            resource.Table(settings.dynamodb_brands_table),
            resource.Table(settings.dynamodb_events_table),
        )

    def _call(self, what: str, fn: Callable[..., dict[str, Any]], **kwargs: Any) -> dict[str, Any]:
        try:
            return fn(**kwargs)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            logger.error("DynamoDB %s failed code=%s: %s", what, code, e)
            raise StorageError(f"{what} failed: {code}") from e
        except BotoCoreError as e:
            logger.error("DynamoDB %s failed: %r", what, e)
            raise StorageError(f"{what} failed") from e

    def _paged(self, what: str, fn: Callable[..., dict[str, Any]], limit: Optional[int] = None, **kwargs: Any) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        start_key = None
        while True:
            params = dict(kwargs)
            if start_key is not None:
                params["ExclusiveStartKey"] = start_key
            if limit is not None:
                params["Limit"] = limit - len(items)
            resp = self._call(what, fn, **params)
            items.extend(to_plain(i) for i in resp.get("Items", []))
            start_key = resp.get("LastEvaluatedKey")
            if start_key is None or (limit is not None and len(items) >= limit):
                break
        return items[:limit] if limit is not None else items

    def _count(self, what: str, fn: Callable[..., dict[str, Any]], **kwargs: Any) -> int:
        total = 0
        start_key = None
        while True:
            params = dict(kwargs, Select="COUNT")
            if start_key is not None:
                params["ExclusiveStartKey"] = start_key
            resp = self._call(what, fn, **params)
            total += int(resp.get("Count", 0))
            start_key = resp.get("LastEvaluatedKey")
            if start_key is None:
                return total

    # Events

    def scan_events(self, limit: Optional[int] = None, fields: Optional[Iterable[str]] = None) -> list[dict[str, Any]]:
        return self._paged("events scan", self._events.scan, limit, **_projection(fields))

    def query_session_events(self, tracking_id: str) -> list[dict[str, Any]]:
        return self._paged(
            "events query",
            self._events.query,
            KeyConditionExpression=Key("tracking_id").eq(tracking_id),
            ScanIndexForward=True,
        )

    def events_by_brand(self, brand: str, limit: int = 100) -> list[dict[str, Any]]:
        return self._paged(
            "events by brand",
            self._events.query,
            limit,
            IndexName=BRAND_INDEX,
            KeyConditionExpression=Key("brand").eq(brand),
            ScanIndexForward=False,
        )

    def events_by_link(self, link_uuid: str, limit: int = 100) -> list[dict[str, Any]]:
        return self._paged(
            "events by link",
            self._events.query,
            limit,
            IndexName=LINK_INDEX,
            KeyConditionExpression=Key("link_uuid").eq(link_uuid),
            ScanIndexForward=False,
        )

    def _since_filter(self, since: str, event_type: Optional[str]) -> Any:
        cond = Attr("timestamp").gte(since)
        if event_type is not None:
            cond = Attr("event_type").eq(event_type) & cond
        return cond

    def events_since(self, since: str, event_type: Optional[str] = None) -> list[dict[str, Any]]:
        return self._paged("events scan", self._events.scan, FilterExpression=self._since_filter(since, event_type))

    def count_events(self, since: str, event_type: Optional[str] = None) -> int:
        return self._count("events count", self._events.scan, FilterExpression=self._since_filter(since, event_type))

    # Brands and links

    def list_brands(self) -> list[str]:
        items = self._paged("brands scan", self._brands.scan, **_projection(["brand"]))
        return sorted({i["brand"] for i in items if i.get("brand")})

    def create_brand(self, name: str, *, created_at: str, created_by: str = "dashboard") -> None:
        try:
            self._brands.put_item(
                Item=placeholder_item(name, created_at=created_at, created_by=created_by),
                ConditionExpression="attribute_not_exists(brand) AND attribute_not_exists(#uuid)",
                ExpressionAttributeNames={"#uuid": "UUID"},
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise BrandExistsError() from e
            logger.error("DynamoDB brand create failed: %s", e)
            raise StorageError("brand create failed") from e

    def list_brand_links(self, brand: str) -> list[dict[str, Any]]:
        return self._paged("brand links query", self._brands.query, KeyConditionExpression=Key("brand").eq(brand))

    def get_brand_link(self, brand: str, uuid: str) -> Optional[dict[str, Any]]:
        resp = self._call("brand link get", self._brands.get_item, Key={"brand": brand, "UUID": uuid})
        item = resp.get("Item")
        return to_plain(item) if item else None

    def delete_brand_link(self, brand: str, uuid: str) -> None:
        self._call("brand link delete", self._brands.delete_item, Key={"brand": brand, "UUID": uuid})

    def count_links(self, status: Optional[str] = None) -> int:
        cond = Attr("UUID").ne(PLACEHOLDER_UUID)
        if status is not None:
            cond = cond & Attr("link_status").eq(status)
        return self._count("brands count", self._brands.scan, FilterExpression=cond)
