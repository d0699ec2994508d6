"""
Sales territory reporting pipeline
Territory rankings, product classification, customer segmentation, cross-sell
targeting, composite scoring and budget allocation over a sales/CRM snapshot.
"""

from sales_reports.relations import InputRelations, SchemaError
from sales_reports.reports import REPORTS, build_reports_from_database, run_all_reports, run_report

__version__ = '0.1.0'

__all__ = [
    'InputRelations',
    'SchemaError',
    'REPORTS',
    'run_report',
    'run_all_reports',
    'build_reports_from_database',
]
