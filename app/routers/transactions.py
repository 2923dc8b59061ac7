"""Routers for transaction endpoints:
    POST  /api/v1/transactions:validator
    POST  /api/v1/transactions:summary
"""

from __future__ import annotations
import logging
from fastapi import APIRouter
from app.config import settings
from app.models.schemas import (
    SummaryRequest,
    TransactionSummary,
    ValidatorRequest,
    ValidatorResponse,
)
from app.services.transaction_service import summarise_tax_year, validate_transactions

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1",
    tags=["Transactions"],
)

# ── 1. Transaction Validator ─────────────────────────────────────────────

@router.post(
    "/transactions:validator",
    response_model=ValidatorResponse,
    summary="Validate income and expense transactions",
)
async def transaction_validator(body: ValidatorRequest) -> ValidatorResponse:
    """Check dates, amounts and category/type consistency.  Returns
    separate valid / invalid lists.
    """
    if not body.transactions:
        return ValidatorResponse(valid=[], invalid=[])

    valid, invalid = validate_transactions(body.transactions)
    logger.debug("Validated %d transactions (%d invalid)", len(body.transactions), len(invalid))
    return ValidatorResponse(valid=valid, invalid=invalid)

# ── 2. Tax-year Summary ──────────────────────────────────────────────────

@router.post(
    "/transactions:summary",
    response_model=TransactionSummary,
    summary="Total income and deductible expenses for a tax year",
)
async def transaction_summary(body: SummaryRequest) -> TransactionSummary:
    """Summarise valid transactions dated inside the tax year.  Invalid
    rows are excluded and counted in ``invalidCount``.
    """
    tax_year = body.taxYear if body.taxYear is not None else settings.DEFAULT_TAX_YEAR
    valid, invalid = validate_transactions(body.transactions)

    summary = summarise_tax_year(valid, tax_year)
    summary.invalidCount = len(invalid)
    return summary
