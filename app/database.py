"""PostgreSQL connection and session management for the audit trail.

The database is *optional*: when PostgreSQL is unreachable the API keeps
serving computations and simply skips writing audit rows.
"""

from __future__ import annotations
import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config import settings
from app.models.db_models import Base, ComputationAudit
from app.models.schemas import TaxComputationResult
from app.utils.helpers import finite_or_zero

logger = logging.getLogger(__name__)

_engine = None
_async_session_factory = None
_db_available: bool = False


async def init_db() -> None:
    """Create the async engine and session factory, then the audit table."""
    global _engine, _async_session_factory, _db_available

    try:
        _engine = create_async_engine(
            settings.DATABASE_URL,
            echo=False,
            pool_pre_ping=True,
        )
        _async_session_factory = async_sessionmaker(
            bind=_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        async with _engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        _db_available = True
        logger.info("Audit database connected.")
    except Exception as exc:
        _db_available = False
        logger.warning("Audit database unavailable — continuing without it: %s", exc)


async def close_db() -> None:
    """Dispose of the connection pool."""
    global _engine, _db_available
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _db_available = False
        logger.info("Audit database connection pool closed.")


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession | None, None]:
    """Yield an async session if DB is available, otherwise yield None."""
    if not _db_available or _async_session_factory is None:
        yield None
        return

    session = _async_session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def record_computation(
    endpoint: str,
    gross_income: Optional[float],
    result: TaxComputationResult,
    tax_year: Optional[int] = None,
    bracket_count: int = 0,
) -> None:
    """Write a ``ComputationAudit`` row when the database is available.

    Audit failures are logged and the computation is still served.
    """
    try:
        async with get_session() as session:
            if session is None:
                return
            session.add(
                ComputationAudit(
                    endpoint=endpoint,
                    tax_year=tax_year,
                    gross_income=finite_or_zero(gross_income),
                    taxable_income=result.taxableIncome,
                    tax_owed=result.taxOwed,
                    deductions_capped=result.deductionsCapped,
                    bracket_count=bracket_count,
                    summary=json.dumps({
                        "effectiveRatePercent": result.effectiveRatePercent,
                        "marginalRatePercent": result.marginalRatePercent,
                        "statutoryPension": result.statutoryPension,
                    }),
                )
            )
    except (SQLAlchemyError, OSError):
        logger.warning("Failed to write audit row for %s", endpoint, exc_info=True)
