"""
db/models/platform_response.py

One platform's answer to one scan query, plus its mention classification.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, JSONType, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from db.models.scan_query import ScanQuery


class PlatformResponse(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "platform_responses"

    query_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("scan_queries.id", ondelete="CASCADE"),
        nullable=False,
    )
    platform: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="OPENAI, ANTHROPIC, GEMINI, PERPLEXITY",
    )
    response_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    citations: Mapped[list[str]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="Sorted citation URLs returned with the answer",
    )
    tokens_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    latency_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_error: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    mentioned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    mention_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    mention_excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)
    citation_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    confidence: Mapped[float | None] = mapped_column(Float, nullable=True)

    query: Mapped[ScanQuery] = relationship(back_populates="responses")

    __table_args__ = (
        UniqueConstraint("query_id", "platform"),
        Index("ix_platform_responses_platform", "platform"),
    )
