"""
Input relations for the sales reports
An immutable snapshot of the seven source tables as pandas DataFrames
"""

import logging
from dataclasses import dataclass
from typing import Dict, List

import pandas as pd

logger = logging.getLogger(__name__)


class SchemaError(ValueError):
    """An input relation is missing required columns"""


REQUIRED_COLUMNS: Dict[str, List[str]] = {
    'territories': [
        'territory_id', 'name', 'country_region_code',
        'sales_ytd', 'sales_last_year', 'cost_ytd', 'cost_last_year',
    ],
    'customers': ['customer_id', 'store_id', 'territory_id'],
    'orders': ['order_id', 'customer_id', 'territory_id', 'order_date', 'total_due'],
    'order_lines': ['order_id', 'product_id', 'line_total'],
    'products': ['product_id', 'name', 'list_price', 'standard_cost', 'subcategory_id'],
    'subcategories': ['subcategory_id', 'name', 'category_id'],
    'categories': ['category_id', 'name'],
}

NUMERIC_COLUMNS: Dict[str, List[str]] = {
    'territories': ['sales_ytd', 'sales_last_year', 'cost_ytd', 'cost_last_year'],
    'orders': ['total_due'],
    'order_lines': ['line_total'],
    'products': ['list_price', 'standard_cost'],
}


def _prepare(name: str, frame: pd.DataFrame) -> pd.DataFrame:
    missing = [col for col in REQUIRED_COLUMNS[name] if col not in frame.columns]
    if missing:
        raise SchemaError(f"Relation '{name}' is missing columns: {', '.join(missing)}")

    prepared = frame[REQUIRED_COLUMNS[name]].copy()
    for col in NUMERIC_COLUMNS.get(name, []):
        prepared[col] = pd.to_numeric(prepared[col], errors='coerce').astype(float)
    if name == 'orders':
        prepared['order_date'] = pd.to_datetime(prepared['order_date'], errors='coerce')
    return prepared.reset_index(drop=True)


@dataclass(frozen=True, eq=False)
class InputRelations:
    """Read-only snapshot of the source tables taken once per report run"""

    territories: pd.DataFrame
    customers: pd.DataFrame
    orders: pd.DataFrame
    order_lines: pd.DataFrame
    products: pd.DataFrame
    subcategories: pd.DataFrame
    categories: pd.DataFrame

    @classmethod
    def from_frames(cls, **frames: pd.DataFrame) -> 'InputRelations':
        """
        Validate and copy the source frames

        Keyword names must match REQUIRED_COLUMNS. Row order is preserved
        because it breaks ties when bucketing.

        Raises:
            SchemaError: a relation or one of its columns is missing
        """
        unknown = sorted(set(frames) - set(REQUIRED_COLUMNS))
        if unknown:
            raise SchemaError(f"Unknown relations: {', '.join(unknown)}")
        absent = [name for name in REQUIRED_COLUMNS if name not in frames]
        if absent:
            raise SchemaError(f"Missing relations: {', '.join(absent)}")

        prepared = {name: _prepare(name, frames[name]) for name in REQUIRED_COLUMNS}
        logger.debug(
            "Snapshot prepared: " + ", ".join(f"{name}={len(df)}" for name, df in prepared.items())
        )
        return cls(**prepared)

    def row_counts(self) -> Dict[str, int]:
        return {name: len(getattr(self, name)) for name in REQUIRED_COLUMNS}
