"""SQLAlchemy ORM models for the optional audit trail."""

from __future__ import annotations
from datetime import datetime
from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ComputationAudit(Base):
    """One row per tax computation served by the API."""

    __tablename__ = "computation_audits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    endpoint: Mapped[str] = mapped_column(String(256), nullable=False)
    tax_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gross_income: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    taxable_income: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    tax_owed: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    deductions_capped: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    bracket_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
