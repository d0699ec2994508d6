"""
Aggregation stage shared by the reports
Group facts by a key with named reducers, derive ratios and lagged growth,
and build the joined fact tables the reports start from.
"""

from typing import Dict, List, Sequence, Tuple, Union

import pandas as pd

from sales_reports.components.statistics import safe_divide
from sales_reports.relations import InputRelations

REDUCERS = {
    'sum': 'sum',
    'mean': 'mean',
    'count': 'count',
    'count_distinct': 'nunique',
    'min': 'min',
    'max': 'max',
    'first': 'first',
}

Keys = Union[str, Sequence[str]]


def aggregate(frame: pd.DataFrame, keys: Keys,
              measures: Dict[str, Tuple[str, str]]) -> pd.DataFrame:
    """
    Group a fact table and reduce it to one row per key value

    Args:
        frame: Fact rows
        keys: Grouping column(s)
        measures: output name -> (source column, reducer name from REDUCERS)

    Returns:
        pd.DataFrame: one row per distinct key present in ``frame``, in order
        of first appearance, with missing key values as a group of their own
    """
    keys = [keys] if isinstance(keys, str) else list(keys)
    named = {}
    for name, (column, reducer) in measures.items():
        if reducer not in REDUCERS:
            raise ValueError(f"Unknown reducer '{reducer}' for measure '{name}'")
        named[name] = pd.NamedAgg(column=column, aggfunc=REDUCERS[reducer])

    if frame.empty:
        columns = {key: frame[key].iloc[0:0].reset_index(drop=True) for key in keys}
        columns.update({name: pd.Series(dtype=float) for name in measures})
        return pd.DataFrame(columns)

    return frame.groupby(keys, sort=False, dropna=False).agg(**named).reset_index()


def add_ratio(frame: pd.DataFrame, name: str, numerator: str, denominator: str) -> pd.DataFrame:
    """Add ``numerator / denominator`` as a column, undefined on a zero denominator"""
    frame = frame.copy()
    frame[name] = safe_divide(frame[numerator].astype(float), frame[denominator])
    return frame


def add_lagged_growth(frame: pd.DataFrame, entity: str, period: str, measure: str,
                      growth_column: str = 'growth_rate') -> pd.DataFrame:
    """
    Attach the previous period's value and the period-over-period growth rate

    The previous period is the entity's nearest earlier period present in
    the data. The first period of every entity has no comparator, so its
    growth rate is undefined, as is growth from a zero prior value.
    """
    ordered = frame.sort_values([entity, period], kind='mergesort').copy()
    previous = f'prev_{measure}'
    ordered[previous] = ordered.groupby(entity, sort=False)[measure].shift(1)
    ordered[growth_column] = safe_divide(
        ordered[measure].astype(float) - ordered[previous].astype(float),
        ordered[previous]
    )
    return ordered.reset_index(drop=True)


# ============================================
# JOINED FACT TABLES
# ============================================

def territory_label(territories: pd.DataFrame) -> pd.Series:
    """Display label '<name> <country region code>'"""
    return territories['name'].astype(str) + ' ' + territories['country_region_code'].astype(str)


def territory_metrics(relations: InputRelations) -> pd.DataFrame:
    """Per-territory growth and profit measures taken straight from the territory table"""
    t = relations.territories
    metrics = t[['territory_id', 'sales_ytd', 'sales_last_year', 'cost_ytd', 'cost_last_year']].copy()
    metrics.insert(1, 'region', territory_label(t))
    metrics['yoy_growth'] = safe_divide(t['sales_ytd'] - t['sales_last_year'], t['sales_last_year'])
    metrics['profit_last_year'] = t['sales_last_year'] - t['cost_last_year']
    metrics['profit_ytd'] = t['sales_ytd'] - t['cost_ytd']
    return metrics


def order_facts(relations: InputRelations) -> pd.DataFrame:
    """Orders joined to their customer and the territory that booked them"""
    territories = relations.territories[['territory_id']].copy()
    territories['territory'] = territory_label(relations.territories)

    return (
        relations.orders
        .merge(relations.customers[['customer_id', 'store_id']], on='customer_id', how='inner')
        .merge(territories, on='territory_id', how='inner')
    )


def product_lines(relations: InputRelations) -> pd.DataFrame:
    """Order lines joined to their order and the product / subcategory / category hierarchy"""
    products = relations.products.rename(columns={'name': 'product_name'})
    subcategories = relations.subcategories.rename(columns={'name': 'subcategory_name'})
    categories = relations.categories.rename(columns={'name': 'category_name'})

    return (
        relations.orders[['order_id', 'customer_id', 'territory_id', 'order_date']]
        .merge(relations.order_lines, on='order_id', how='inner')
        .merge(products, on='product_id', how='inner')
        .merge(subcategories, on='subcategory_id', how='inner')
        .merge(categories, on='category_id', how='inner')
    )


def distinct_pairs(frame: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
    return frame[columns].drop_duplicates().reset_index(drop=True)
