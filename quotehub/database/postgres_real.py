"""
Real Postgres-backed offering store for production when DATABASE_URL is set.
Implements the same interface as quotehub.database.postgres (in-memory stub).
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import List, Sequence

from sqlalchemy import create_engine, delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from quotehub.database.models import Base, OfferingRow
from quotehub.integrations.contracts.offerings import LOCALES, CanonicalOffering, LocalizedFields, OfferingKind

logger = logging.getLogger(__name__)


def _normalize_connection_string(s: str) -> str:
    """Strip common mistakes: 'psql \'...\'', extra quotes, whitespace."""
    s = s.strip()
    if re.match(r"^psql\s+", s, re.IGNORECASE):
        s = re.sub(r"^psql\s+", "", s, flags=re.IGNORECASE).strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        s = s[1:-1].strip()
    if s.startswith("postgres://"):
        s = "postgresql://" + s[len("postgres://"):]
    return s


class PostgresDB:
    """
    Offering store using SQLAlchemy. Use when DATABASE_URL is set.
    """

    def __init__(self, connection_string: str) -> None:
        connection_string = _normalize_connection_string(connection_string)
        engine_kwargs = {"pool_pre_ping": True}
        if not connection_string.startswith("sqlite"):
            engine_kwargs.update(pool_size=5, max_overflow=10)
        self.engine = create_engine(connection_string, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False)

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def _session(self) -> Session:
        s = self.SessionLocal()
        try:
            yield s
            s.commit()
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    # ------------------------------------------------------------------ #
    # Offerings
    # ------------------------------------------------------------------ #
    def replace_offerings(self, kind: OfferingKind, offerings: Sequence[CanonicalOffering]) -> int:
        """
        Swap the serving rows for `kind` in one transaction.

        Readers keep seeing the previous rows until the commit, so a refresh
        never exposes a half-written table.
        """
        rows = [_to_row(o) for o in offerings]
        with self._session() as s:
            s.execute(delete(OfferingRow).where(OfferingRow.kind == kind.value))
            s.add_all(rows)
        logger.info("Replaced %s offerings: %d rows", kind.value, len(rows))
        return len(rows)

    def list_offerings(self, kind: OfferingKind) -> List[CanonicalOffering]:
        with self._session() as s:
            stmt = select(OfferingRow).where(OfferingRow.kind == kind.value).order_by(OfferingRow.bank_name, OfferingRow.created_at)
            return [_from_row(row) for row in s.execute(stmt).scalars().all()]

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False


def _to_row(offering: CanonicalOffering) -> OfferingRow:
    return OfferingRow(
        kind=offering.kind.value,
        bank_name=offering.bank_name,
        url=offering.url,
        created_at=offering.created_at,
        **{locale: offering.locale(locale).to_dict() for locale in LOCALES},
    )


def _from_row(row: OfferingRow) -> CanonicalOffering:
    return CanonicalOffering(
        kind=OfferingKind(row.kind),
        bank_name=row.bank_name,
        url=row.url,
        created_at=row.created_at,
        **{locale: LocalizedFields(**(getattr(row, locale) or {})) for locale in LOCALES},
    )
