"""
Expansion budget allocation
Quartile-based opportunity score per territory, weighted by revenue share,
turned into a share of the expansion budget with a projected return.
"""

import logging

import pandas as pd

from sales_reports.components.aggregation import add_ratio, aggregate, order_facts, territory_metrics
from sales_reports.components.decision_tables import INVESTMENT_TIER
from sales_reports.components.statistics import quantile_buckets, safe_divide
from sales_reports.config import EXPANSION_BUDGET
from sales_reports.relations import InputRelations

logger = logging.getLogger(__name__)

COLUMNS = [
    'region', 'investment_tier', 'sales_ytd', 'cost_ytd', 'profit_ytd', 'customer_count',
    'cac', 'profit_per_customer', 'roi_ratio',
    'cac_quartile', 'profit_quartile', 'roi_quartile', 'revenue_quartile',
    'opportunity_score', 'revenue_share', 'allocation_weight',
    'dollar_allocation', 'projected_return',
]


def territory_performance(relations: InputRelations) -> pd.DataFrame:
    """Acquisition cost, profit per customer and ROI for territories with orders"""
    customers = aggregate(
        order_facts(relations), 'territory_id', {'customer_count': ('customer_id', 'count_distinct')}
    )
    performance = territory_metrics(relations).merge(customers, on='territory_id', how='inner')

    performance = add_ratio(performance, 'cac', 'cost_ytd', 'customer_count')
    performance = add_ratio(performance, 'profit_per_customer', 'profit_ytd', 'customer_count')
    return add_ratio(performance, 'roi_ratio', 'profit_ytd', 'cost_ytd')


def allocation_weights(opportunity: pd.Series, revenue: pd.Series) -> pd.Series:
    """
    Normalised (opportunity x revenue share) weights

    Undefined or negative products contribute nothing, so the weights are
    non-negative and sum to 1 whenever any entity carries weight.
    """
    revenue = revenue.astype(float)
    share = safe_divide(revenue, revenue.sum())
    weighted = (opportunity.astype('float64') * share).fillna(0.0).clip(lower=0)
    return safe_divide(weighted, weighted.sum())


def budget_allocation_report(relations: InputRelations, budget: float = EXPANSION_BUDGET) -> pd.DataFrame:
    allocation = territory_performance(relations)

    # lower acquisition cost is better, so its quartile is inverted below
    allocation['cac_quartile'] = quantile_buckets(allocation['cac'], 4)
    allocation['profit_quartile'] = quantile_buckets(allocation['profit_per_customer'], 4)
    allocation['roi_quartile'] = quantile_buckets(allocation['roi_ratio'], 4)
    allocation['revenue_quartile'] = quantile_buckets(allocation['sales_ytd'], 4)

    allocation['opportunity_score'] = (
        (5 - allocation['cac_quartile'])
        + allocation['profit_quartile']
        + allocation['roi_quartile']
        + allocation['revenue_quartile']
    )
    allocation['revenue_share'] = safe_divide(
        allocation['sales_ytd'], allocation['sales_ytd'].sum()
    )
    allocation['allocation_weight'] = allocation_weights(
        allocation['opportunity_score'], allocation['sales_ytd']
    )
    allocation['dollar_allocation'] = allocation['allocation_weight'] * budget
    allocation['projected_return'] = allocation['dollar_allocation'] * allocation['roi_ratio']
    allocation['investment_tier'] = INVESTMENT_TIER.apply(allocation)

    logger.debug(f"Allocated {allocation['dollar_allocation'].sum():,.2f} of {budget:,.2f}")

    report = allocation.sort_values(
        'opportunity_score', ascending=False, na_position='last', kind='mergesort'
    )
    return report[COLUMNS].reset_index(drop=True)
