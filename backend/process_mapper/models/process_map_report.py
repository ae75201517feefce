from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from process_mapper.models.base import Base, TimestampMixin, UUIDMixin


class ProcessMapReport(Base, UUIDMixin, TimestampMixin):
    """Snapshot of a finished process map, written when the report step is reached."""

    __tablename__ = "process_map_reports"

    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    industry: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    source: Mapped[str] = mapped_column(String(20), nullable=False, default="benchmark")
    # camelCase export document, same shape as the JSON export
    data: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    process_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    interaction_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
