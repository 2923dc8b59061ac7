"""Draft tax-filing assembly."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from app.models.schemas import TaxComputationResult, TaxFilingDraft
from app.utils.helpers import finite_or_zero, round_currency


def build_filing_draft(
    tax_year: int,
    gross_income: Optional[float],
    result: TaxComputationResult,
    prepared_at: Optional[datetime] = None,
) -> TaxFilingDraft:
    """Turn a computation into a draft filing with amounts to the cent."""
    prepared_at = prepared_at or datetime.now(timezone.utc)
    return TaxFilingDraft(
        taxYear=tax_year,
        totalIncome=round_currency(finite_or_zero(gross_income)),
        totalDeductions=round_currency(result.deductions),
        taxableIncome=round_currency(result.taxableIncome),
        calculatedTax=round_currency(result.taxOwed),
        effectiveRatePercent=round_currency(result.effectiveRatePercent),
        status="draft",
        preparedAt=prepared_at.isoformat(),
    )
