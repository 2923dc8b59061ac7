"""Pydantic request / response schemas for all API endpoints.

Naming follows the freelancer tax workflow:
  - TaxBracket / TaxComputationInput / TaxComputationResult → the tax engine
  - TaxRuleSet   → statutory brackets + standard deduction for one tax year
  - FinanceTransaction → a recorded income or expense
  - TaxFilingDraft → unsaved filing assembled from a computation
"""

from __future__ import annotations
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

# ── Tax engine ────────────────────────────────────────────────────────────

class TaxBracket(BaseModel):
    """A contiguous income range taxed at a single rate."""
    min: float = Field(0.0, description="Lower bound of the bracket")
    max: Optional[float] = Field(None, description="Upper bound; null means unbounded")
    ratePercent: float = Field(0.0, description="Marginal rate in percent (e.g. 12 for 12 %)")

class TaxComputationInput(BaseModel):
    """Income profile plus bracket table.  Every numeric field is optional."""
    grossIncome: Optional[float] = None
    additionalDeductions: Optional[float] = None
    standardDeduction: Optional[float] = None
    brackets: List[TaxBracket] = Field(default_factory=list)
    pensionRatePercent: Optional[float] = Field(None, description="Statutory pension rate in percent")
    pensionAnnualCap: Optional[float] = Field(None, description="Annual cap on the pension deduction")

class BracketContribution(BaseModel):
    min: float
    max: Optional[float]
    ratePercent: float
    taxableAtBracket: float = Field(..., description="Slice of taxable income falling in this bracket")
    taxAtBracket: float = Field(..., description="Tax charged on that slice")

class TaxComputationResult(BaseModel):
    deductions: float = Field(..., description="Deductions applied (never above gross income)")
    taxableIncome: float
    taxOwed: float
    effectiveRatePercent: float = Field(..., description="taxOwed / grossIncome × 100")
    marginalRatePercent: float = Field(..., description="Rate of the highest bracket reached")
    statutoryPension: float
    breakdown: List[BracketContribution]
    deductionsCapped: bool = Field(..., description="True when deductions were limited to gross income")
    uncappedDeductions: float = Field(..., description="Deductions before the gross-income cap")

# ── Tax rules ─────────────────────────────────────────────────────────────

class TaxRuleSet(BaseModel):
    taxYear: int
    standardDeduction: float = 0.0
    brackets: List[TaxBracket]

class TaxYearsResponse(BaseModel):
    taxYears: List[int]
    defaultTaxYear: int

# ── Calculator (server-side rules) ────────────────────────────────────────

class TaxCalculateRequest(BaseModel):
    taxYear: Optional[int] = Field(None, description="Defaults to the configured tax year")
    grossIncome: Optional[float] = None
    additionalDeductions: Optional[float] = Field(
        None, description="Business expenses, itemised deductions, etc.",
    )

class TaxCalculateResponse(BaseModel):
    taxYear: int
    currency: str
    grossIncome: float
    standardDeduction: float
    additionalDeductions: float
    result: TaxComputationResult

class TaxFilingDraft(BaseModel):
    """A draft tax filing built from a computation (not persisted)."""
    taxYear: int
    totalIncome: float
    totalDeductions: float
    taxableIncome: float
    calculatedTax: float
    effectiveRatePercent: float
    status: Literal["draft", "filed"] = "draft"
    preparedAt: str = Field(..., description="ISO-8601 UTC timestamp")

# ── Transactions ──────────────────────────────────────────────────────────

TransactionType = Literal["income", "expense"]

class FinanceTransaction(BaseModel):
    """A recorded income or expense."""
    date: str = Field(..., description="Transaction date (YYYY-MM-DD)")
    type: TransactionType
    category: str
    amount: float
    description: str = ""
    isTaxDeductible: bool = False

class InvalidFinanceTransaction(FinanceTransaction):
    """A transaction that failed validation, with reason."""
    message: str = Field(..., description="Human-readable validation error")

class ValidatorRequest(BaseModel):
    transactions: List[FinanceTransaction]

class ValidatorResponse(BaseModel):
    valid: List[FinanceTransaction]
    invalid: List[InvalidFinanceTransaction]

class SummaryRequest(BaseModel):
    taxYear: Optional[int] = None
    transactions: List[FinanceTransaction] = Field(default_factory=list)

class TransactionSummary(BaseModel):
    taxYear: int
    totalIncome: float = Field(..., description="Sum of income amounts in the year")
    totalExpenses: float = Field(..., description="Sum of all expense amounts in the year")
    deductibleExpenses: float = Field(..., description="Sum of tax-deductible expenses")
    netIncome: float = Field(..., description="totalIncome − totalExpenses")
    transactionCount: int
    invalidCount: int = 0

class EstimateResponse(BaseModel):
    summary: TransactionSummary
    calculation: TaxCalculateResponse
    deductionBenefit: float = Field(
        ..., description="Tax saved by claiming the deductible expenses",
    )
