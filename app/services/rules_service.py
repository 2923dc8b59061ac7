"""Statutory tax rules — bracket tables and standard deduction per tax year.

Rows follow the flat ``tax_rules`` layout (one row per bracket, the year's
standard deduction repeated on each row):

    (tax_year, income_bracket_min, income_bracket_max, tax_rate, standard_deduction)

2024 brackets (standard deduction 14 600):
    0        – 11 000    → 10 %
    11 000   – 44 725    → 12 %
    44 725   – 95 375    → 22 %
    95 375   – 182 050   → 24 %
    182 050  – 231 250   → 32 %
    231 250  – 578 125   → 35 %
    Above 578 125        → 37 %
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from app.config import settings
from app.models.schemas import TaxBracket, TaxRuleSet

logger = logging.getLogger(__name__)

RuleRow = Tuple[int, float, Optional[float], float, float]

_DEFAULT_RULE_ROWS: List[RuleRow] = [
    # (tax_year, min, max, tax_rate, standard_deduction)
    (2024, 0.0,       11_000.0,  0.10, 14_600.0),
    (2024, 11_000.0,  44_725.0,  0.12, 14_600.0),
    (2024, 44_725.0,  95_375.0,  0.22, 14_600.0),
    (2024, 95_375.0,  182_050.0, 0.24, 14_600.0),
    (2024, 182_050.0, 231_250.0, 0.32, 14_600.0),
    (2024, 231_250.0, 578_125.0, 0.35, 14_600.0),
    (2024, 578_125.0, None,      0.37, 14_600.0),
]


def rate_to_percent(rate: float) -> float:
    """Normalise a stored rate to percent.

    Rule tables store rates as fractions (``0.10``); the engine works in
    percent.  Values of 1 and above are taken as percentages already.
    """
    if 0 <= rate < 1:
        return round(rate * 100, 6)
    return rate


def load_rule_sets(rows: Iterable[RuleRow]) -> Dict[int, TaxRuleSet]:
    """Group flat rule rows into one ``TaxRuleSet`` per tax year.

    The standard deduction is taken from the lowest bracket of each year.
    """
    grouped: Dict[int, List[RuleRow]] = defaultdict(list)
    for row in rows:
        grouped[row[0]].append(row)

    rule_sets: Dict[int, TaxRuleSet] = {}
    for year, year_rows in grouped.items():
        year_rows.sort(key=lambda r: r[1])
        rule_sets[year] = TaxRuleSet(
            taxYear=year,
            standardDeduction=year_rows[0][4],
            brackets=[
                TaxBracket(min=lo, max=hi, ratePercent=rate_to_percent(rate))
                for _, lo, hi, rate, _ in year_rows
            ],
        )
        logger.debug("Loaded %d brackets for tax year %s", len(year_rows), year)
    return rule_sets


_RULE_SETS: Dict[int, TaxRuleSet] = load_rule_sets(_DEFAULT_RULE_ROWS)


def available_tax_years() -> List[int]:
    return sorted(_RULE_SETS)


def get_rule_set(tax_year: int) -> Optional[TaxRuleSet]:
    """Return the rule set for *tax_year*, or ``None`` if unknown."""
    return _RULE_SETS.get(tax_year)


def standard_deduction_for(rule_set: TaxRuleSet) -> float:
    """Rule-set standard deduction, falling back to the configured default."""
    return rule_set.standardDeduction or settings.FALLBACK_STANDARD_DEDUCTION
