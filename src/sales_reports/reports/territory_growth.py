"""
Territory growth ranking
Quartiles of year-over-year sales growth and of profit per territory, with
business-friendly quartile labels.
"""

import logging

import pandas as pd

from sales_reports.components.aggregation import territory_metrics
from sales_reports.components.decision_tables import quartile_labels
from sales_reports.components.statistics import quantile_buckets
from sales_reports.relations import InputRelations

logger = logging.getLogger(__name__)

COLUMNS = [
    'region', 'yoy_growth', 'yoy_growth_quartile', 'yoy_growth_ranking',
    'profit_last_year', 'profit_last_year_quartile',
    'profit_ytd', 'profit_ytd_quartile', 'profit_ytd_ranking',
]


def territory_growth_report(relations: InputRelations) -> pd.DataFrame:
    metrics = territory_metrics(relations)

    metrics['yoy_growth_quartile'] = quantile_buckets(metrics['yoy_growth'], 4)
    metrics['profit_last_year_quartile'] = quantile_buckets(metrics['profit_last_year'], 4)
    metrics['profit_ytd_quartile'] = quantile_buckets(metrics['profit_ytd'], 4)

    metrics['yoy_growth_ranking'] = quartile_labels(metrics['yoy_growth_quartile'])
    metrics['profit_ytd_ranking'] = quartile_labels(metrics['profit_ytd_quartile'])

    undefined = int(metrics['yoy_growth'].isna().sum())
    if undefined:
        logger.info(f"{undefined} territories have no prior-year sales; growth left unranked")

    report = metrics.sort_values(
        'yoy_growth_quartile', ascending=False, na_position='last', kind='mergesort'
    )
    return report[COLUMNS].reset_index(drop=True)
