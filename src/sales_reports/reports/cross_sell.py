"""
Cross-sell opportunity identification
Finds customers who never bought from a high-margin category, sizes the
opportunity per territory and category, and ranks territories by it.
"""

import logging

import pandas as pd

from sales_reports.components.aggregation import aggregate, distinct_pairs, order_facts, product_lines
from sales_reports.components.decision_tables import OPPORTUNITY_PRIORITY
from sales_reports.components.statistics import percentile_cont
from sales_reports.config import CROSS_SELL_MULTIPLIER, HIGH_MARGIN_THRESHOLD
from sales_reports.relations import InputRelations

logger = logging.getLogger(__name__)

DETAIL_COLUMNS = ['territory', 'missing_category', 'potential_customers', 'avg_margin', 'potential_revenue']
REPORT_COLUMNS = [
    'territory', 'total_cross_sell_targets', 'number_of_opportunities',
    'total_potential_revenue', 'q3_customers', 'opportunity_priority',
]


def purchased_categories(relations: InputRelations) -> pd.DataFrame:
    """Distinct (customer_id, category_id) pairs the customer has bought from"""
    lines = product_lines(relations)
    booked = order_facts(relations)[['order_id']]
    purchases = lines.merge(booked, on='order_id', how='inner')
    return distinct_pairs(purchases, ['customer_id', 'category_id'])


def category_performance(relations: InputRelations,
                         threshold: float = HIGH_MARGIN_THRESHOLD) -> pd.DataFrame:
    """
    High-margin categories worth cross-selling

    The average margin (list price - standard cost) is taken over sold
    order lines, so best-selling products weigh more.
    """
    lines = product_lines(relations)
    lines['margin'] = lines['list_price'] - lines['standard_cost']

    performance = aggregate(
        lines,
        ['category_id', 'category_name'],
        {
            'avg_margin': ('margin', 'mean'),
            'customer_count': ('customer_id', 'count_distinct'),
        }
    )
    high_margin = performance[performance['avg_margin'].astype(float) > threshold]
    return high_margin.reset_index(drop=True)


def missing_category_pairs(scope: pd.DataFrame, categories: pd.DataFrame, observed: pd.DataFrame,
                           entity: str = 'customer_id', category: str = 'category_id') -> pd.DataFrame:
    """
    Complement of the observed purchases within scope x categories

    Every scope row is paired with every category, then pairs found in
    ``observed`` are removed with a hashed anti-join.

    Args:
        scope: Entities in scope (must hold ``entity``; other columns are kept)
        categories: Categories of interest (must hold ``category``)
        observed: Observed (entity, category) pairs

    Returns:
        pd.DataFrame: scope x categories rows with no observed purchase
    """
    candidates = scope.merge(categories, how='cross')
    seen = observed[[entity, category]].drop_duplicates()
    flagged = candidates.merge(seen, on=[entity, category], how='left', indicator=True)
    missing = flagged[flagged['_merge'] == 'left_only'].drop(columns='_merge')
    return missing.reset_index(drop=True)


def cross_sell_detail(relations: InputRelations) -> pd.DataFrame:
    """Potential customers and revenue per territory and missing high-margin category"""
    high_margin = category_performance(relations)
    if high_margin.empty:
        return pd.DataFrame(columns=DETAIL_COLUMNS)

    scope = distinct_pairs(order_facts(relations), ['customer_id', 'territory'])
    missing = missing_category_pairs(
        scope,
        high_margin[['category_id', 'category_name', 'avg_margin']],
        purchased_categories(relations)
    )
    logger.debug(f"{len(missing)} (customer, category) pairs without a purchase")

    detail = aggregate(
        missing.rename(columns={'category_name': 'missing_category'}),
        ['territory', 'missing_category', 'avg_margin'],
        {'potential_customers': ('customer_id', 'count_distinct')}
    )
    detail['potential_revenue'] = (
        detail['potential_customers'] * detail['avg_margin'].astype(float) * CROSS_SELL_MULTIPLIER
    )
    return detail[DETAIL_COLUMNS]


def cross_sell_report(relations: InputRelations) -> pd.DataFrame:
    detail = cross_sell_detail(relations)

    territories = aggregate(
        detail,
        'territory',
        {
            'total_cross_sell_targets': ('potential_customers', 'sum'),
            'number_of_opportunities': ('missing_category', 'count_distinct'),
            'total_potential_revenue': ('potential_revenue', 'sum'),
        }
    )
    territories['q3_customers'] = percentile_cont(territories['total_cross_sell_targets'], 0.75)
    territories['opportunity_priority'] = OPPORTUNITY_PRIORITY.apply(territories)

    report = territories.sort_values('total_cross_sell_targets', ascending=False, kind='mergesort')
    return report[REPORT_COLUMNS].reset_index(drop=True)
