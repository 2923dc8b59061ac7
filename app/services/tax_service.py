"""Progressive income-tax computation.

Given gross income, deductions and a bracket table, computes:

    pension        = gross × pensionRate / 100, clamped to the annual cap
    uncapped       = max(0, standard + additional + pension)
    deductions     = min(gross, uncapped)
    taxable        = max(0, gross − deductions)
    tax            = Σ slice_in_bracket × rate / 100   (brackets sorted by min)
    effective rate = tax / gross × 100                   (0 when gross ≤ 0)
    marginal rate  = rate of the last bracket receiving a non-zero slice

Inputs are normalised first (missing / non-finite numbers → 0) and
intermediate overflow saturates at the largest finite float, so
``compute_tax`` has no error path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from app.models.schemas import (
    BracketContribution,
    TaxBracket,
    TaxComputationInput,
    TaxComputationResult,
)
from app.utils.helpers import (
    clamp_finite,
    finite_or_zero,
    round_currency,
    upper_bound_or_none,
)


@dataclass(frozen=True)
class NormalisedBracket:
    min: float
    max: Optional[float]  # None → unbounded
    rate_percent: float

    @property
    def is_unbounded(self) -> bool:
        return self.max is None


@dataclass(frozen=True)
class NormalisedTaxInput:
    gross_income: float
    additional_deductions: float
    standard_deduction: float
    brackets: Tuple[NormalisedBracket, ...]  # sorted by min ascending
    pension_rate_percent: float
    pension_annual_cap: Optional[float]  # None → no cap


# ── Normalisation ─────────────────────────────────────────────────────────

def _normalise_bracket(bracket: TaxBracket) -> NormalisedBracket:
    return NormalisedBracket(
        min=finite_or_zero(bracket.min),
        max=upper_bound_or_none(bracket.max),
        rate_percent=finite_or_zero(bracket.ratePercent),
    )


def normalise_input(tax_input: TaxComputationInput) -> NormalisedTaxInput:
    """Coerce every numeric field to a finite float and sort the brackets.

    Missing, NaN and infinite values become 0.  Upper bounds (bracket max,
    pension cap) treat ``None`` and +inf as unbounded instead.
    """
    brackets = sorted(
        (_normalise_bracket(b) for b in tax_input.brackets),
        key=lambda b: b.min,
    )
    return NormalisedTaxInput(
        gross_income=finite_or_zero(tax_input.grossIncome),
        additional_deductions=finite_or_zero(tax_input.additionalDeductions),
        standard_deduction=finite_or_zero(tax_input.standardDeduction),
        brackets=tuple(brackets),
        pension_rate_percent=finite_or_zero(tax_input.pensionRatePercent),
        pension_annual_cap=upper_bound_or_none(tax_input.pensionAnnualCap),
    )


# ── Computation ───────────────────────────────────────────────────────────

def calculate_statutory_pension(
    gross_income: float,
    rate_percent: float,
    annual_cap: Optional[float] = None,
) -> float:
    """Pension = gross × rate / 100, clamped to *annual_cap* when given."""
    pension = clamp_finite(gross_income * (rate_percent / 100))
    if annual_cap is not None:
        pension = min(pension, annual_cap)
    return pension


def _taxable_in_bracket(taxable_income: float, bracket: NormalisedBracket) -> float:
    above_min = clamp_finite(taxable_income - bracket.min)
    if bracket.is_unbounded:
        return above_min
    return min(above_min, clamp_finite(bracket.max - bracket.min))


def _compute(data: NormalisedTaxInput) -> TaxComputationResult:
    gross = data.gross_income

    pension = calculate_statutory_pension(
        gross, data.pension_rate_percent, data.pension_annual_cap
    )
    uncapped = max(
        0.0, clamp_finite(data.standard_deduction + data.additional_deductions + pension)
    )
    deductions = min(gross, uncapped)
    taxable_income = max(0.0, gross - deductions)

    tax_owed = 0.0
    marginal_rate = 0.0
    breakdown: List[BracketContribution] = []

    for bracket in data.brackets:
        if taxable_income <= bracket.min:
            continue
        taxable_at = _taxable_in_bracket(taxable_income, bracket)
        if taxable_at <= 0:
            continue
        tax_at = clamp_finite(taxable_at * (bracket.rate_percent / 100))
        tax_owed = clamp_finite(tax_owed + tax_at)
        marginal_rate = bracket.rate_percent
        breakdown.append(
            BracketContribution(
                min=bracket.min,
                max=bracket.max,
                ratePercent=bracket.rate_percent,
                taxableAtBracket=taxable_at,
                taxAtBracket=tax_at,
            )
        )

    effective_rate = clamp_finite((tax_owed / gross) * 100) if gross > 0 else 0.0

    return TaxComputationResult(
        deductions=deductions,
        taxableIncome=taxable_income,
        taxOwed=tax_owed,
        effectiveRatePercent=effective_rate,
        marginalRatePercent=marginal_rate,
        statutoryPension=pension,
        breakdown=breakdown,
        deductionsCapped=deductions < uncapped,
        uncappedDeductions=uncapped,
    )


def compute_tax(tax_input: TaxComputationInput) -> TaxComputationResult:
    """Compute the full progressive-tax breakdown for *tax_input*.

    Pure and total: malformed bracket tables (gaps, overlaps, unsorted) are
    tolerated and simply sliced in ``min`` order.
    """
    return _compute(normalise_input(tax_input))


def calculate_deduction_benefit(
    tax_input: TaxComputationInput,
    extra_deduction: float,
) -> float:
    """Tax benefit = Tax(without extra deduction) − Tax(with it).

    *extra_deduction* is added on top of the input's additional deductions.
    """
    base = tax_input.model_copy(
        update={"additionalDeductions": finite_or_zero(tax_input.additionalDeductions)}
    )
    with_extra = base.model_copy(
        update={"additionalDeductions": base.additionalDeductions + finite_or_zero(extra_deduction)}
    )
    tax_without = compute_tax(base).taxOwed
    tax_with = compute_tax(with_extra).taxOwed
    return round_currency(tax_without - tax_with)
