"""
Customer segmentation
Tertiles of customer revenue, order frequency and order value per
(customer, territory), combined into actionable segments and summarised by
territory and customer type.
"""

import logging

import pandas as pd

from sales_reports.components.aggregation import aggregate, order_facts
from sales_reports.components.decision_tables import CUSTOMER_SEGMENT, CUSTOMER_TYPE
from sales_reports.components.statistics import months_between, quantile_buckets
from sales_reports.relations import InputRelations

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    'territory', 'customer_type', 'customer_segment', 'customer_count',
    'avg_revenue_score', 'avg_frequency_score', 'avg_aov_score', 'total_revenue',
]


def customer_segment_detail(relations: InputRelations, as_of=None) -> pd.DataFrame:
    """
    Per-customer value metrics, tertiles and segment

    Args:
        relations: Input snapshot
        as_of: Reference date for recency (defaults to today)

    Returns:
        pd.DataFrame: one row per (customer, territory) with order_count,
        total_revenue, avg_order_value, customer_lifespan_days,
        last_order_date, customer_type, revenue/frequency/aov segments,
        months_since_last_order and customer_segment
    """
    as_of = pd.Timestamp(as_of) if as_of is not None else pd.Timestamp.today().normalize()

    metrics = aggregate(
        order_facts(relations),
        ['customer_id', 'territory'],
        {
            'store_id': ('store_id', 'first'),
            'order_count': ('order_id', 'count_distinct'),
            'total_revenue': ('total_due', 'sum'),
            'avg_order_value': ('total_due', 'mean'),
            'first_order_date': ('order_date', 'min'),
            'last_order_date': ('order_date', 'max'),
        }
    )
    metrics['customer_lifespan_days'] = (
        pd.to_datetime(metrics['last_order_date']) - pd.to_datetime(metrics['first_order_date'])
    ).dt.days

    metrics['customer_type'] = CUSTOMER_TYPE.apply(metrics)
    metrics['revenue_segment'] = quantile_buckets(metrics['total_revenue'], 3)
    metrics['frequency_segment'] = quantile_buckets(metrics['order_count'], 3)
    metrics['aov_segment'] = quantile_buckets(metrics['avg_order_value'], 3)
    metrics['months_since_last_order'] = months_between(metrics['last_order_date'], as_of)
    metrics['customer_segment'] = CUSTOMER_SEGMENT.apply(metrics)

    return metrics


def customer_segment_report(relations: InputRelations, as_of=None) -> pd.DataFrame:
    detail = customer_segment_detail(relations, as_of=as_of)
    if detail.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    for col in ['revenue_segment', 'frequency_segment', 'aov_segment']:
        detail[col] = detail[col].astype('float64')

    summary = aggregate(
        detail,
        ['territory', 'customer_type', 'customer_segment'],
        {
            'customer_count': ('customer_id', 'count'),
            'avg_revenue_score': ('revenue_segment', 'mean'),
            'avg_frequency_score': ('frequency_segment', 'mean'),
            'avg_aov_score': ('aov_segment', 'mean'),
            'total_revenue': ('total_revenue', 'sum'),
        }
    )
    logger.debug(f"{len(detail)} customers summarised into {len(summary)} segment rows")

    report = summary.sort_values(
        ['territory', 'customer_count'], ascending=[True, False], kind='mergesort'
    )
    return report[SUMMARY_COLUMNS].reset_index(drop=True)
