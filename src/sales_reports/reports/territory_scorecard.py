"""
Territory composite scorecard
Six performance dimensions per territory normalised to 0-100 with
PERCENT_RANK, combined into one weighted score and a strategic recommendation.
"""

import logging

import pandas as pd

from sales_reports.components.aggregation import aggregate, order_facts, territory_metrics
from sales_reports.components.decision_tables import STRATEGIC_RECOMMENDATION
from sales_reports.components.statistics import percent_rank, safe_divide, weighted_composite
from sales_reports.config import SCORECARD_WEIGHTS
from sales_reports.relations import InputRelations

logger = logging.getLogger(__name__)

# measure -> score column
SCORE_DIMENSIONS = {
    'yoy_growth': 'growth_score',
    'avg_profit': 'profit_score',
    'customer_count': 'customer_score',
    'total_revenue': 'revenue_score',
    'revenue_per_customer': 'efficiency_score',
    'product_diversity': 'diversity_score',
}

COLUMNS = [
    'region', 'composite_score', 'strategic_recommendation',
    'yoy_growth', 'avg_profit', 'customer_count', 'total_revenue',
    'revenue_per_customer', 'product_diversity',
] + list(SCORE_DIMENSIONS.values())


def territory_score_metrics(relations: InputRelations) -> pd.DataFrame:
    """Raw scorecard measures for every territory with at least one order line"""
    facts = order_facts(relations)
    lines = (
        facts[['order_id', 'territory_id', 'customer_id']]
        .merge(relations.order_lines[['order_id', 'product_id']], on='order_id', how='inner')
        .merge(relations.products[['product_id']], on='product_id', how='inner')
    )
    # revenue counts each order once, not once per line
    orders = facts[facts['order_id'].isin(lines['order_id'])]

    revenue = aggregate(
        orders,
        'territory_id',
        {
            'customer_count': ('customer_id', 'count_distinct'),
            'total_revenue': ('total_due', 'sum'),
        }
    )
    diversity = aggregate(lines, 'territory_id', {'product_diversity': ('product_id', 'count_distinct')})

    territories = territory_metrics(relations).rename(columns={'profit_ytd': 'avg_profit'})
    metrics = (
        territories[['territory_id', 'region', 'yoy_growth', 'avg_profit']]
        .merge(revenue, on='territory_id', how='inner')
        .merge(diversity, on='territory_id', how='inner')
    )
    metrics['revenue_per_customer'] = safe_divide(
        metrics['total_revenue'].astype(float), metrics['customer_count']
    )
    return metrics


def territory_scorecard_report(relations: InputRelations) -> pd.DataFrame:
    scorecard = territory_score_metrics(relations)

    for measure, score in SCORE_DIMENSIONS.items():
        scorecard[score] = (percent_rank(scorecard[measure]) * 100).round(2)

    scorecard['composite_score'] = weighted_composite(scorecard, SCORECARD_WEIGHTS)
    scorecard['strategic_recommendation'] = STRATEGIC_RECOMMENDATION.apply(scorecard)

    unscored = int(scorecard['composite_score'].isna().sum())
    if unscored:
        logger.info(f"{unscored} territories left unscored (undefined growth)")

    report = scorecard.sort_values(
        'composite_score', ascending=False, na_position='last', kind='mergesort'
    )
    return report[COLUMNS].reset_index(drop=True)
