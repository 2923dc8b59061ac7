# Test type: Unit Test
# Validation to be executed: Validates transaction checks (date, amount,
#   category/type consistency) and tax-year summaries.
# Command: pytest test/test_unit_transactions.py -v

"""Unit tests for app.services.transaction_service module."""

import pytest

from app.models.schemas import FinanceTransaction
from app.services.transaction_service import summarise_tax_year, validate_transactions


def _txn(**overrides):
    fields = dict(date="2024-05-01", type="expense", category="travel", amount=100.0)
    fields.update(overrides)
    return FinanceTransaction(**fields)


class TestValidateTransactions:

    def test_all_valid(self, sample_transactions):
        valid, invalid = validate_transactions(sample_transactions)
        assert len(valid) == 6
        assert invalid == []

    def test_date_normalised(self):
        valid, _ = validate_transactions([_txn(date="2024-05-01 09:15:00")])
        assert valid[0].date == "2024-05-01"

    def test_invalid_date(self):
        _, invalid = validate_transactions([_txn(date="01/05/2024")])
        assert "Invalid date format" in invalid[0].message

    def test_non_positive_amount(self):
        _, invalid = validate_transactions([_txn(amount=0), _txn(amount=-5)])
        assert len(invalid) == 2
        assert all("must be positive" in t.message for t in invalid)

    def test_nan_amount(self):
        _, invalid = validate_transactions([_txn(amount=float("nan"))])
        assert "must be positive" in invalid[0].message

    def test_amount_too_large(self):
        _, invalid = validate_transactions([_txn(amount=1e12)])
        assert "exceeds maximum" in invalid[0].message

    def test_category_type_mismatch(self):
        _, invalid = validate_transactions([_txn(type="income", category="travel")])
        assert "not a valid income category" in invalid[0].message

    def test_unknown_category(self):
        _, invalid = validate_transactions([_txn(category="yacht")])
        assert "not a valid expense category" in invalid[0].message

    def test_deductible_income_rejected(self):
        _, invalid = validate_transactions(
            [_txn(type="income", category="freelance_income", isTaxDeductible=True)]
        )
        assert "Income cannot be tax-deductible" in invalid[0].message

    def test_multiple_errors_joined(self):
        _, invalid = validate_transactions([_txn(date="bad", amount=-1)])
        assert invalid[0].message.count("; ") == 1

    def test_input_not_mutated(self):
        original = _txn(date="2024-05-01 09:15")
        validate_transactions([original])
        assert original.date == "2024-05-01 09:15"


class TestSummariseTaxYear:

    def test_totals(self, sample_transactions):
        summary = summarise_tax_year(sample_transactions, 2024)
        assert summary.taxYear == 2024
        assert summary.totalIncome == 60_000
        assert summary.totalExpenses == 4_500
        assert summary.deductibleExpenses == 4_000
        assert summary.netIncome == 55_500
        assert summary.transactionCount == 5

    def test_other_year_only(self, sample_transactions):
        summary = summarise_tax_year(sample_transactions, 2023)
        assert summary.totalIncome == 9_999
        assert summary.transactionCount == 1

    def test_empty(self):
        summary = summarise_tax_year([], 2024)
        assert summary.totalIncome == 0
        assert summary.transactionCount == 0

    def test_unparsable_date_raises(self):
        with pytest.raises(ValueError):
            summarise_tax_year([_txn(date="nope")], 2024)
