"""Routers for tax endpoints:
    POST  /api/v1/tax:compute
    GET   /api/v1/tax/rules
    GET   /api/v1/tax/rules/{tax_year}
    POST  /api/v1/tax:calculate
    POST  /api/v1/tax:filing
    POST  /api/v1/tax:estimate
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from app.config import settings
from app.database import record_computation
from app.models.schemas import (
    EstimateResponse,
    SummaryRequest,
    TaxCalculateRequest,
    TaxCalculateResponse,
    TaxComputationInput,
    TaxComputationResult,
    TaxFilingDraft,
    TaxRuleSet,
    TaxYearsResponse,
)
from app.services.filing_service import build_filing_draft
from app.services.rules_service import (
    available_tax_years,
    get_rule_set,
    standard_deduction_for,
)
from app.services.tax_service import calculate_deduction_benefit, compute_tax
from app.services.transaction_service import summarise_tax_year, validate_transactions
from app.utils.helpers import finite_or_zero

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1",
    tags=["Tax"],
)


# ── Shared pipeline ──────────────────────────────────────────────────────

def _require_rule_set(tax_year: Optional[int]) -> TaxRuleSet:
    year = tax_year if tax_year is not None else settings.DEFAULT_TAX_YEAR
    rule_set = get_rule_set(year)
    if rule_set is None:
        raise HTTPException(
            status_code=404,
            detail=f"No tax rules configured for tax year {year}",
        )
    return rule_set


def _build_input(
    rule_set: TaxRuleSet,
    gross_income: Optional[float],
    additional_deductions: Optional[float],
) -> TaxComputationInput:
    """Combine user figures with the year's rules and the configured pension."""
    return TaxComputationInput(
        grossIncome=gross_income,
        additionalDeductions=additional_deductions,
        standardDeduction=standard_deduction_for(rule_set),
        brackets=rule_set.brackets,
        pensionRatePercent=settings.STATUTORY_PENSION_RATE_PERCENT,
        pensionAnnualCap=settings.STATUTORY_PENSION_ANNUAL_CAP,
    )


async def _calculate(
    body: TaxCalculateRequest,
    endpoint: str,
) -> TaxCalculateResponse:
    rule_set = _require_rule_set(body.taxYear)
    tax_input = _build_input(rule_set, body.grossIncome, body.additionalDeductions)
    result = compute_tax(tax_input)

    if result.deductionsCapped:
        logger.info(
            "Deductions capped at gross income for tax year %s (%.2f > %.2f)",
            rule_set.taxYear, result.uncappedDeductions, result.deductions,
        )
    await record_computation(
        endpoint,
        body.grossIncome,
        result,
        tax_year=rule_set.taxYear,
        bracket_count=len(rule_set.brackets),
    )

    return TaxCalculateResponse(
        taxYear=rule_set.taxYear,
        currency=settings.CURRENCY,
        grossIncome=finite_or_zero(body.grossIncome),
        standardDeduction=tax_input.standardDeduction,
        additionalDeductions=finite_or_zero(body.additionalDeductions),
        result=result,
    )


# ── 1. Raw computation ───────────────────────────────────────────────────

@router.post(
    "/tax:compute",
    response_model=TaxComputationResult,
    summary="Compute progressive tax for a caller-supplied bracket table",
)
async def tax_compute(body: TaxComputationInput) -> TaxComputationResult:
    """Run the progressive-tax engine on the given income profile.

    Missing or non-finite numbers are treated as zero; malformed bracket
    tables are tolerated.
    """
    result = compute_tax(body)
    await record_computation(
        "/tax:compute", body.grossIncome, result, bracket_count=len(body.brackets)
    )
    return result


# ── 2. Rule tables ───────────────────────────────────────────────────────

@router.get(
    "/tax/rules",
    response_model=TaxYearsResponse,
    summary="List tax years with configured rules",
)
async def tax_rule_years() -> TaxYearsResponse:
    return TaxYearsResponse(
        taxYears=available_tax_years(),
        defaultTaxYear=settings.DEFAULT_TAX_YEAR,
    )


@router.get(
    "/tax/rules/{tax_year}",
    response_model=TaxRuleSet,
    summary="Bracket table and standard deduction for a tax year",
)
async def tax_rules(tax_year: int) -> TaxRuleSet:
    return _require_rule_set(tax_year)


# ── 3. Calculator ────────────────────────────────────────────────────────

@router.post(
    "/tax:calculate",
    response_model=TaxCalculateResponse,
    summary="Estimate tax using the configured rules for a tax year",
)
async def tax_calculate(body: TaxCalculateRequest) -> TaxCalculateResponse:
    """Apply the year's brackets, standard deduction and statutory pension
    to the supplied gross income and additional deductions.
    """
    return await _calculate(body, "/tax:calculate")


# ── 4. Draft filing ──────────────────────────────────────────────────────

@router.post(
    "/tax:filing",
    response_model=TaxFilingDraft,
    summary="Prepare a draft tax filing from a calculation",
)
async def tax_filing(body: TaxCalculateRequest) -> TaxFilingDraft:
    calculation = await _calculate(body, "/tax:filing")
    return build_filing_draft(
        calculation.taxYear, calculation.grossIncome, calculation.result
    )


# ── 5. Estimate from transactions ────────────────────────────────────────

@router.post(
    "/tax:estimate",
    response_model=EstimateResponse,
    summary="Estimate tax from recorded income and expense transactions",
)
async def tax_estimate(body: SummaryRequest) -> EstimateResponse:
    """Summarise the year's valid transactions and run the calculator with
    income as gross and deductible expenses as additional deductions.
    """
    rule_set = _require_rule_set(body.taxYear)
    valid, invalid = validate_transactions(body.transactions)
    if invalid:
        logger.info("Skipping %d invalid transactions in estimate", len(invalid))

    summary = summarise_tax_year(valid, rule_set.taxYear)
    summary.invalidCount = len(invalid)

    calculation = await _calculate(
        TaxCalculateRequest(
            taxYear=rule_set.taxYear,
            grossIncome=summary.totalIncome,
            additionalDeductions=summary.deductibleExpenses,
        ),
        "/tax:estimate",
    )
    benefit = calculate_deduction_benefit(
        _build_input(rule_set, summary.totalIncome, 0.0),
        summary.deductibleExpenses,
    )

    return EstimateResponse(
        summary=summary,
        calculation=calculation,
        deductionBenefit=benefit,
    )
