"""
SQLAlchemy models for canonical bank offerings.
Used by postgres_real when DATABASE_URL is set.
"""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import uuid4
from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OfferingRow(Base):
    __tablename__ = "offerings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    kind: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    bank_name: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    url: Mapped[str] = mapped_column(Text, default="", nullable=False)
    uz: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    ru: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    en: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    oz: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
