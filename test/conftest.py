# Test type: Configuration
# Validation to be executed: Shared fixtures for all test modules
# Command: pytest test/ -v (this file is auto-loaded by pytest)

"""Shared pytest fixtures for the Freelancer Tax API test suite."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.models.schemas import FinanceTransaction, TaxBracket


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def client():
    """Async HTTP client bound to the FastAPI app (no real server needed)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


# ── Sample data fixtures ─────────────────────────────────────────────────

@pytest.fixture
def two_brackets():
    """10 % up to 10 000, 20 % above."""
    return [
        TaxBracket(min=0, max=10_000, ratePercent=10),
        TaxBracket(min=10_000, max=None, ratePercent=20),
    ]


@pytest.fixture
def sample_transactions():
    """A freelancer's 2024 year plus one stray 2023 invoice."""
    return [
        FinanceTransaction(date="2024-01-15", type="income", category="freelance_income",
                           amount=40_000, description="Website build"),
        FinanceTransaction(date="2024-06-30", type="income", category="consulting_income",
                           amount=20_000, description="Architecture review"),
        FinanceTransaction(date="2024-03-02", type="expense", category="software_subscriptions",
                           amount=1_200, description="IDE licence", isTaxDeductible=True),
        FinanceTransaction(date="2024-09-10", type="expense", category="equipment",
                           amount=2_800, description="Laptop", isTaxDeductible=True),
        FinanceTransaction(date="2024-11-20", type="expense", category="meals_entertainment",
                           amount=500, description="Team dinner"),
        FinanceTransaction(date="2023-12-31", type="income", category="freelance_income",
                           amount=9_999, description="Late 2023 invoice"),
    ]
