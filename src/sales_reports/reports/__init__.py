"""
Report registry
Every report is a pure function of an InputRelations snapshot returning a DataFrame.
"""

import logging
from typing import Callable, Dict, Optional

import pandas as pd

from sales_reports.config import get_db_path
from sales_reports.relations import InputRelations
from sales_reports.reports.budget_allocation import budget_allocation_report
from sales_reports.reports.cross_sell import cross_sell_report
from sales_reports.reports.customer_segments import customer_segment_report
from sales_reports.reports.product_portfolio import product_portfolio_report
from sales_reports.reports.territory_growth import territory_growth_report
from sales_reports.reports.territory_scorecard import territory_scorecard_report
from sales_reports.utils.database_connector import DatabaseConnector

logger = logging.getLogger(__name__)

REPORTS: Dict[str, Callable[..., pd.DataFrame]] = {
    'territory_growth': territory_growth_report,
    'product_portfolio': product_portfolio_report,
    'customer_segments': customer_segment_report,
    'cross_sell': cross_sell_report,
    'territory_scorecard': territory_scorecard_report,
    'budget_allocation': budget_allocation_report,
}


def run_report(name: str, relations: InputRelations, **options) -> pd.DataFrame:
    """
    Build one report by name

    Raises:
        KeyError: unknown report name
    """
    try:
        builder = REPORTS[name]
    except KeyError:
        raise KeyError(f"Unknown report '{name}'. Available: {', '.join(REPORTS)}") from None
    return builder(relations, **options)


def run_all_reports(relations: InputRelations, as_of=None) -> Dict[str, pd.DataFrame]:
    """
    Build every report from the same snapshot

    Args:
        relations: Input snapshot
        as_of: Reference date for customer recency (defaults to today)

    Returns:
        Dict[str, pd.DataFrame]: report name -> report rows
    """
    options = {'customer_segments': {'as_of': as_of}}
    results = {}
    for i, name in enumerate(REPORTS, 1):
        report = run_report(name, relations, **options.get(name, {}))
        logger.info(f"[{i}/{len(REPORTS)}] {name}: {len(report)} rows, {len(report.columns)} columns")
        results[name] = report
    return results


def build_reports_from_database(db_path: Optional[str] = None, as_of=None) -> Dict[str, pd.DataFrame]:
    """Load one consistent snapshot from the database and build every report"""
    with DatabaseConnector(db_path or get_db_path()) as db:
        relations = db.load_relations()
    return run_all_reports(relations, as_of=as_of)
