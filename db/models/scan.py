"""
db/models/scan.py

Scan model: one visibility scan of one website, and its lifecycle state.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.domain.scan_status import ScanStatus
from db.base import Base, JSONType, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from db.models.platform_result import PlatformResult
    from db.models.scan_query import ScanQuery


class Scan(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "scans"

    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    domain: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=ScanStatus.PENDING.value,
    )
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_step: Mapped[str | None] = mapped_column(String(255), nullable=True)
    regions: Mapped[list[str]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="Selected region codes in request order",
    )
    site_title: Mapped[str | None] = mapped_column(String(512), nullable=True)
    site_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    industry: Mapped[str | None] = mapped_column(String(128), nullable=True)
    keywords: Mapped[list[str] | None] = mapped_column(
        JSONType,
        nullable=True,
        comment="Ranked keywords extracted by the scraper",
    )
    scraped_data: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    overall_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    queries: Mapped[list[ScanQuery]] = relationship(
        back_populates="scan",
        order_by="ScanQuery.position",
        cascade="all, delete-orphan",
    )
    platform_results: Mapped[list[PlatformResult]] = relationship(
        back_populates="scan",
        order_by="PlatformResult.platform",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_scans_status", "status"),
        Index("ix_scans_created_at", "created_at"),
        Index("ix_scans_domain", "domain"),
    )
