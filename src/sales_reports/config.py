"""
Configuration for the sales reports
Business constants shared with report consumers, database location and logging setup
"""

import logging
import os
from pathlib import Path
from typing import Optional

# ============================================
# BUSINESS CONSTANTS
# ============================================

# Cross-sell: categories worth targeting and revenue projection
HIGH_MARGIN_THRESHOLD = 100
CROSS_SELL_MULTIPLIER = 2.5
PRIORITY_MEDIUM_FRACTION = 0.5

# Territory scorecard weights (growth / profit / customers / revenue / efficiency)
SCORECARD_WEIGHTS = {
    'growth_score': 0.30,
    'profit_score': 0.25,
    'customer_score': 0.20,
    'revenue_score': 0.15,
    'efficiency_score': 0.10,
}

# Budget allocation
INVESTMENT_TIER_BREAKPOINTS = (14, 11, 8)
EXPANSION_BUDGET = 10_000_000

# Customer segmentation
AT_RISK_MONTHS = 12

# ============================================
# DATABASE
# ============================================

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_DB_PATH = PROJECT_ROOT / 'database' / 'sales.db'
DB_PATH_ENV = 'SALES_REPORTS_DB'


def get_db_path() -> Path:
    """Database path, overridable with the SALES_REPORTS_DB environment variable"""
    override = os.environ.get(DB_PATH_ENV)
    if override:
        return Path(override)
    return DEFAULT_DB_PATH


# ============================================
# LOGGING
# ============================================

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configure root logging for report runs

    Args:
        level: Logging level
        log_file: Optional file to mirror the console output into
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )
