"""
Decision tables for the report classifications
Each table is an ordered list of (predicate, label) rules evaluated top to
bottom with a mandatory default label. Labels are part of the report output
and must not be reworded.
"""

import math
from typing import Any, Callable, Iterable, Mapping, NamedTuple, Optional

import pandas as pd

from sales_reports.config import (
    AT_RISK_MONTHS,
    INVESTMENT_TIER_BREAKPOINTS,
    PRIORITY_MEDIUM_FRACTION,
)

Predicate = Callable[[Mapping[str, Any]], bool]


class DecisionTableError(ValueError):
    """A decision table is malformed (no default label, bad rule)"""


class Rule(NamedTuple):
    predicate: Predicate
    label: str


def _normalize(row: Mapping[str, Any]) -> dict:
    # pd.NA cannot be used in a boolean context; NaN compares False everywhere
    return {key: (math.nan if value is None or value is pd.NA or (
        isinstance(value, float) and math.isnan(value)) else value)
        for key, value in row.items()}


class DecisionTable:
    """Ordered first-match-wins classification rules with a default label"""

    def __init__(self, name: str, rules: Iterable[Rule], default: Optional[str]):
        if not default:
            raise DecisionTableError(f"Decision table '{name}' has no default label")
        self.name = name
        self.rules = tuple(rules)
        self.default = default
        for rule in self.rules:
            if not callable(rule.predicate) or not rule.label:
                raise DecisionTableError(f"Decision table '{name}' has an invalid rule: {rule!r}")

    @property
    def labels(self):
        return [rule.label for rule in self.rules] + [self.default]

    def classify(self, row: Mapping[str, Any]) -> str:
        values = _normalize(row)
        for rule in self.rules:
            if rule.predicate(values):
                return rule.label
        return self.default

    def apply(self, frame: pd.DataFrame) -> pd.Series:
        """Classify every row of a DataFrame, returning labels aligned with its index"""
        labels = [self.classify(row) for row in frame.to_dict('records')]
        return pd.Series(labels, index=frame.index, dtype=object)

    def __repr__(self):
        return f"DecisionTable({self.name!r}, {len(self.rules)} rules, default={self.default!r})"


# ============================================
# TERRITORY GROWTH RANKING
# ============================================

QUARTILE_RANKING = DecisionTable(
    'quartile_ranking',
    [
        Rule(lambda r: r['quartile'] == 4, 'Top Quartile (Top 25%)'),
        Rule(lambda r: r['quartile'] == 3, 'Third Quartile'),
        Rule(lambda r: r['quartile'] == 2, 'Second Quartile'),
    ],
    default='Bottom Quartile (Bottom 25%)'
)


def quartile_labels(quartiles: pd.Series) -> pd.Series:
    """Label quartile indices; unbucketed rows get no label"""
    labels = QUARTILE_RANKING.apply(quartiles.to_frame('quartile'))
    return labels.where(quartiles.notna().to_numpy(), None)


# ============================================
# PRODUCT PORTFOLIO
# ============================================

PRODUCT_CLASSIFICATION = DecisionTable(
    'product_classification',
    [
        Rule(lambda r: r['avg_revenue'] >= r['q3_revenue'] and r['avg_growth_rate'] >= r['q3_growth'],
             'Star (High Revenue, High Growth)'),
        Rule(lambda r: r['avg_revenue'] >= r['q3_revenue'] and r['avg_growth_rate'] < r['q3_growth'],
             'Cash Cow (High Revenue, Low Growth)'),
        Rule(lambda r: r['avg_revenue'] < r['q3_revenue'] and r['avg_growth_rate'] >= r['q3_growth'],
             'Question Mark (Low Revenue, High Growth)'),
    ],
    default='Dog (Low Revenue, Low Growth)'
)

# ============================================
# CUSTOMER SEGMENTATION
# ============================================

CUSTOMER_TYPE = DecisionTable(
    'customer_type',
    [
        Rule(lambda r: pd.isna(r['store_id']), 'Individual Consumer'),
    ],
    default='Business Account'
)

CUSTOMER_SEGMENT = DecisionTable(
    'customer_segment',
    [
        Rule(lambda r: r['revenue_segment'] == 3 and r['frequency_segment'] >= 2,
             'Champions (Retain & Reward)'),
        Rule(lambda r: r['revenue_segment'] == 3 and r['frequency_segment'] == 1,
             'Big Spenders (Increase Frequency)'),
        Rule(lambda r: r['revenue_segment'] == 2 and r['frequency_segment'] == 3,
             'Loyal Customers (Upsell)'),
        Rule(lambda r: r['revenue_segment'] == 1 and r['frequency_segment'] == 3,
             'Promising (Develop)'),
        Rule(lambda r: r['months_since_last_order'] > AT_RISK_MONTHS,
             'At Risk (Win Back)'),
    ],
    default='Requires Attention'
)

# ============================================
# CROSS-SELL PRIORITY
# ============================================

OPPORTUNITY_PRIORITY = DecisionTable(
    'opportunity_priority',
    [
        Rule(lambda r: r['total_cross_sell_targets'] >= r['q3_customers'],
             'High Priority (Top 25%)'),
        Rule(lambda r: r['total_cross_sell_targets'] >= r['q3_customers'] * PRIORITY_MEDIUM_FRACTION,
             'Medium Priority'),
    ],
    default='Low Priority'
)

# ============================================
# TERRITORY SCORECARD
# ============================================

STRATEGIC_RECOMMENDATION = DecisionTable(
    'strategic_recommendation',
    [
        Rule(lambda r: r['growth_score'] > 75 and r['profit_score'] > 75,
             'Accelerate Investment'),
        Rule(lambda r: r['growth_score'] > 75 and r['profit_score'] < 50,
             'Improve Operational Efficiency'),
        Rule(lambda r: r['growth_score'] < 25 and r['revenue_score'] > 75,
             'Market Saturation - Diversify'),
        Rule(lambda r: r['customer_score'] < 50,
             'Focus on Customer Acquisition'),
    ],
    default='Balanced Growth Strategy'
)

# ============================================
# BUDGET ALLOCATION
# ============================================

_TIER_1, _TIER_2, _TIER_3 = INVESTMENT_TIER_BREAKPOINTS

INVESTMENT_TIER = DecisionTable(
    'investment_tier',
    [
        Rule(lambda r: r['opportunity_score'] >= _TIER_1, 'Tier 1: Aggressive Growth (35% of budget)'),
        Rule(lambda r: r['opportunity_score'] >= _TIER_2, 'Tier 2: Steady Growth (40% of budget)'),
        Rule(lambda r: r['opportunity_score'] >= _TIER_3, 'Tier 3: Maintain (20% of budget)'),
    ],
    default='Tier 4: Monitor Only (5% of budget)'
)
