"""
Product portfolio classification
Average annual revenue and year-over-year growth per product, classified
against the population's upper quartiles (Star / Cash Cow / Question Mark / Dog).
"""

import logging

import pandas as pd

from sales_reports.components.aggregation import add_lagged_growth, aggregate, product_lines
from sales_reports.components.decision_tables import PRODUCT_CLASSIFICATION
from sales_reports.components.statistics import percentile_cont
from sales_reports.relations import InputRelations

logger = logging.getLogger(__name__)

COLUMNS = [
    'product_category', 'product_name', 'avg_revenue', 'avg_growth_rate',
    'q1_revenue', 'q3_revenue', 'q1_growth', 'q3_growth', 'classification',
]


def product_annual_revenue(relations: InputRelations) -> pd.DataFrame:
    """
    Revenue per product and order year with the growth over the product's previous year

    Returns:
        pd.DataFrame: product_id, product_name, product_category,
        order_year, annual_revenue, prev_annual_revenue, yoy_growth_rate
    """
    lines = product_lines(relations)
    lines['order_year'] = lines['order_date'].dt.year
    lines = lines.rename(columns={'category_name': 'product_category'})

    revenue = aggregate(
        lines,
        ['product_id', 'product_name', 'product_category', 'order_year'],
        {'annual_revenue': ('line_total', 'sum')}
    )
    return add_lagged_growth(revenue, 'product_id', 'order_year', 'annual_revenue',
                             growth_column='yoy_growth_rate')


def product_portfolio_report(relations: InputRelations) -> pd.DataFrame:
    annual = product_annual_revenue(relations)

    # first tracked year (and growth from zero) has no comparator
    comparable = annual[annual['yoy_growth_rate'].notna()]
    logger.debug(f"{len(annual) - len(comparable)} product-years without a growth comparator")

    products = aggregate(
        comparable,
        ['product_id', 'product_category', 'product_name'],
        {
            'avg_revenue': ('annual_revenue', 'mean'),
            'avg_growth_rate': ('yoy_growth_rate', 'mean'),
        }
    )

    products['q1_revenue'] = percentile_cont(products['avg_revenue'], 0.25)
    products['q3_revenue'] = percentile_cont(products['avg_revenue'], 0.75)
    products['q1_growth'] = percentile_cont(products['avg_growth_rate'], 0.25)
    products['q3_growth'] = percentile_cont(products['avg_growth_rate'], 0.75)
    products['classification'] = PRODUCT_CLASSIFICATION.apply(products)

    report = products.sort_values(
        ['product_category', 'avg_revenue'], ascending=[True, False], kind='mergesort'
    )
    return report[COLUMNS].reset_index(drop=True)
