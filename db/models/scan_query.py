"""
db/models/scan_query.py

One generated prompt within a scan.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from db.models.platform_response import PlatformResponse
    from db.models.scan import Scan


class ScanQuery(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "scan_queries"

    scan_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("scans.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Generation order within the scan",
    )
    query_text: Mapped[str] = mapped_column(Text, nullable=False)
    keyword: Mapped[str] = mapped_column(String(255), nullable=False)
    region: Mapped[str] = mapped_column(String(16), nullable=False)
    region_label: Mapped[str] = mapped_column(String(64), nullable=False)
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)

    scan: Mapped[Scan] = relationship(back_populates="queries")
    responses: Mapped[list[PlatformResponse]] = relationship(
        back_populates="query",
        order_by="PlatformResponse.platform",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_scan_queries_scan_id_position", "scan_id", "position"),
        Index("ix_scan_queries_keyword", "keyword"),
    )
