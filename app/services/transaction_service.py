"""Freelancer transaction validation and tax-year summaries.

1. Validate: check dates, amounts and category/type consistency.
2. Summarise: total income and deductible expenses for one tax year,
   the figures fed into the tax calculator.
"""

from __future__ import annotations
from typing import List, Tuple
from app.config import settings
from app.models.schemas import (
    FinanceTransaction,
    InvalidFinanceTransaction,
    TransactionSummary,
)
from app.utils.helpers import normalise_date_str, parse_date, round_currency

INCOME_CATEGORIES = frozenset({
    "freelance_income",
    "consulting_income",
    "product_sales",
    "other_income",
})

EXPENSE_CATEGORIES = frozenset({
    "office_supplies",
    "software_subscriptions",
    "marketing",
    "travel",
    "meals_entertainment",
    "professional_development",
    "equipment",
    "other_expense",
})

_CATEGORIES_BY_TYPE = {
    "income": INCOME_CATEGORIES,
    "expense": EXPENSE_CATEGORIES,
}


# ── 1. Validate ───────────────────────────────────────────────────────────

def validate_transactions(
    transactions: List[FinanceTransaction],
) -> Tuple[List[FinanceTransaction], List[InvalidFinanceTransaction]]:
    """Validate a list of transactions for data integrity.

    Checks performed:
      • Date is parsable (normalised to YYYY-MM-DD)
      • Amount > 0 and < MAX_AMOUNT
      • Category belongs to the transaction type
      • Income is never marked tax-deductible

    Returns (valid, invalid) lists.
    """
    valid: list[FinanceTransaction] = []
    invalid: list[InvalidFinanceTransaction] = []

    for txn in transactions:
        errors: list[str] = []
        normalised = txn.model_copy()

        # --- Date validation ---
        try:
            normalised.date = normalise_date_str(txn.date)
        except ValueError as e:
            errors.append(str(e))

        # --- Amount constraints ---
        if not normalised.amount > 0:
            errors.append(f"Amount must be positive, got {normalised.amount}")
        elif normalised.amount >= settings.MAX_AMOUNT:
            errors.append(
                f"Amount {normalised.amount} exceeds maximum {settings.MAX_AMOUNT}"
            )

        # --- Category / type consistency ---
        if normalised.category not in _CATEGORIES_BY_TYPE[normalised.type]:
            errors.append(
                f"Category '{normalised.category}' is not a valid "
                f"{normalised.type} category"
            )

        if normalised.type == "income" and normalised.isTaxDeductible:
            errors.append("Income cannot be tax-deductible")

        # --- Partition ---
        if errors:
            invalid.append(
                InvalidFinanceTransaction(
                    **normalised.model_dump(),
                    message="; ".join(errors),
                )
            )
        else:
            valid.append(normalised)

    return valid, invalid


# ── 2. Summarise ──────────────────────────────────────────────────────────

def summarise_tax_year(
    transactions: List[FinanceTransaction],
    tax_year: int,
) -> TransactionSummary:
    """Aggregate transactions dated inside *tax_year*.

    Transactions are expected to be validated already; an unparsable date
    raises ``ValueError``.
    """
    total_income = 0.0
    total_expenses = 0.0
    deductible = 0.0
    count = 0

    for txn in transactions:
        if parse_date(txn.date).year != tax_year:
            continue
        count += 1
        if txn.type == "income":
            total_income += txn.amount
        else:
            total_expenses += txn.amount
            if txn.isTaxDeductible:
                deductible += txn.amount

    return TransactionSummary(
        taxYear=tax_year,
        totalIncome=round_currency(total_income),
        totalExpenses=round_currency(total_expenses),
        deductibleExpenses=round_currency(deductible),
        netIncome=round_currency(total_income - total_expenses),
        transactionCount=count,
    )
