from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from linkdash.core.errors import BrandExistsError, StorageError
from linkdash.domain.models import AnalyticsEventRow, BrandLinkRow
from linkdash.infrastructure.db import create_all, make_engine, make_session_factory
from linkdash.infrastructure.store import PLACEHOLDER_UUID, DashboardStore, placeholder_item, project

logger = logging.getLogger(__name__)


class SqlStore(DashboardStore):
    """Relational backend mirroring the two DynamoDB tables.

    Used for local development and as the substitute store in tests.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._sessions = session_factory

    @classmethod
    def from_url(cls, database_url: str, *, create_tables: bool = True) -> "SqlStore":
        engine = make_engine(database_url)
        if create_tables:
            create_all(engine)
        return cls(make_session_factory(engine))

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._sessions()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("SQL store error: %r", e)
            raise StorageError(str(e)) from e
        finally:
            db.close()

    # Seeding helpers (the capture pipeline and link API write these in production)

    def add_events(self, items: Iterable[dict[str, Any]]) -> None:
        with self._session() as db:
            db.add_all([AnalyticsEventRow.from_item(i) for i in items])
            db.commit()

    def add_links(self, items: Iterable[dict[str, Any]]) -> None:
        with self._session() as db:
            db.add_all([BrandLinkRow.from_item(i) for i in items])
            db.commit()

    # Events

    def scan_events(self, limit: Optional[int] = None, fields: Optional[Iterable[str]] = None) -> list[dict[str, Any]]:
        stmt = select(AnalyticsEventRow)
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._session() as db:
            rows = db.scalars(stmt).all()
            return [project(r.to_item(), fields) for r in rows]

    def query_session_events(self, tracking_id: str) -> list[dict[str, Any]]:
        stmt = (
            select(AnalyticsEventRow)
            .where(AnalyticsEventRow.tracking_id == tracking_id)
            .order_by(AnalyticsEventRow.timestamp.asc())
        )
        with self._session() as db:
            return [r.to_item() for r in db.scalars(stmt).all()]

    def events_by_brand(self, brand: str, limit: int = 100) -> list[dict[str, Any]]:
        stmt = (
            select(AnalyticsEventRow)
            .where(AnalyticsEventRow.brand == brand)
            .order_by(AnalyticsEventRow.timestamp.desc())
            .limit(limit)
        )
        with self._session() as db:
            return [r.to_item() for r in db.scalars(stmt).all()]

    def events_by_link(self, link_uuid: str, limit: int = 100) -> list[dict[str, Any]]:
        stmt = (
            select(AnalyticsEventRow)
            .where(AnalyticsEventRow.link_uuid == link_uuid)
            .order_by(AnalyticsEventRow.timestamp.desc())
            .limit(limit)
        )
        with self._session() as db:
            return [r.to_item() for r in db.scalars(stmt).all()]

    def events_since(self, since: str, event_type: Optional[str] = None) -> list[dict[str, Any]]:
        stmt = select(AnalyticsEventRow).where(AnalyticsEventRow.timestamp >= since)
        if event_type is not None:
            stmt = stmt.where(AnalyticsEventRow.event_type == event_type)
        with self._session() as db:
            return [r.to_item() for r in db.scalars(stmt).all()]

    def count_events(self, since: str, event_type: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(AnalyticsEventRow).where(AnalyticsEventRow.timestamp >= since)
        if event_type is not None:
            stmt = stmt.where(AnalyticsEventRow.event_type == event_type)
        with self._session() as db:
            return int(db.scalar(stmt) or 0)

    # Brands and links

    def list_brands(self) -> list[str]:
        stmt = select(BrandLinkRow.brand).distinct().order_by(BrandLinkRow.brand.asc())
        with self._session() as db:
            return list(db.scalars(stmt).all())

    def create_brand(self, name: str, *, created_at: str, created_by: str = "dashboard") -> None:
        with self._session() as db:
            exists = db.scalar(select(func.count()).select_from(BrandLinkRow).where(BrandLinkRow.brand == name))
            if exists:
                raise BrandExistsError()
            db.add(BrandLinkRow.from_item(placeholder_item(name, created_at=created_at, created_by=created_by)))
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                raise BrandExistsError()

    def list_brand_links(self, brand: str) -> list[dict[str, Any]]:
        stmt = select(BrandLinkRow).where(BrandLinkRow.brand == brand).order_by(BrandLinkRow.uuid.asc())
        with self._session() as db:
            return [r.to_item() for r in db.scalars(stmt).all()]

    def get_brand_link(self, brand: str, uuid: str) -> Optional[dict[str, Any]]:
        with self._session() as db:
            row = db.get(BrandLinkRow, (brand, uuid))
            return row.to_item() if row else None

    def delete_brand_link(self, brand: str, uuid: str) -> None:
        with self._session() as db:
            row = db.get(BrandLinkRow, (brand, uuid))
            if row is not None:
                db.delete(row)
                db.commit()

    def count_links(self, status: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(BrandLinkRow).where(BrandLinkRow.uuid != PLACEHOLDER_UUID)
        if status is not None:
            stmt = stmt.where(BrandLinkRow.link_status == status)
        with self._session() as db:
            return int(db.scalar(stmt) or 0)
