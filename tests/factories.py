"""Shared lightweight factories for tests: a small sales snapshot and its SQLite form."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pandas as pd

AS_OF = pd.Timestamp('2024-06-30')


def sample_frames() -> dict[str, pd.DataFrame]:
    """Four territories (France has no prior-year sales and no orders), seven customers, nine orders."""
    territories = pd.DataFrame(
        [
            (1, 'Northwest', 'US', 500.0, 400.0, 300.0, 200.0),
            (2, 'Southwest', 'US', 1200.0, 1000.0, 600.0, 500.0),
            (3, 'Canada', 'CA', 900.0, 1000.0, 700.0, 600.0),
            (4, 'France', 'FR', 300.0, 0.0, 100.0, 0.0),
        ],
        columns=['territory_id', 'name', 'country_region_code',
                 'sales_ytd', 'sales_last_year', 'cost_ytd', 'cost_last_year'],
    )
    customers = pd.DataFrame(
        [
            (1, None, 1),
            (2, 10, 1),
            (3, None, 2),
            (4, 20, 2),
            (5, None, 3),
            (6, None, 3),
            (7, None, 1),
        ],
        columns=['customer_id', 'store_id', 'territory_id'],
    )
    orders = pd.DataFrame(
        [
            (1, 1, 1, '2022-03-01', 3600.0),
            (2, 1, 1, '2023-05-01', 40.0),
            (3, 2, 1, '2023-06-15', 60.0),
            (4, 3, 2, '2022-07-01', 3500.0),
            (5, 3, 2, '2023-07-01', 7000.0),
            (6, 4, 2, '2023-02-01', 100.0),
            (7, 5, 3, '2021-01-10', 50.0),
            (8, 6, 3, '2023-08-01', 3550.0),
            (9, 7, 1, '2023-09-01', 35.0),
        ],
        columns=['order_id', 'customer_id', 'territory_id', 'order_date', 'total_due'],
    )
    order_lines = pd.DataFrame(
        [
            (1, 101, 3500.0),
            (1, 102, 100.0),
            (2, 102, 40.0),
            (3, 103, 60.0),
            (4, 101, 3500.0),
            (5, 101, 7000.0),
            (6, 102, 35.0),
            (6, 103, 65.0),
            (7, 103, 50.0),
            (8, 101, 3500.0),
            (8, 103, 50.0),
            (9, 102, 35.0),
        ],
        columns=['order_id', 'product_id', 'line_total'],
    )
    products = pd.DataFrame(
        [
            (101, 'Road-150', 3500.0, 2100.0, 1),
            (102, 'Sport Helmet', 35.0, 13.0, 2),
            (103, 'Long-Sleeve Jersey', 50.0, 38.0, 3),
        ],
        columns=['product_id', 'name', 'list_price', 'standard_cost', 'subcategory_id'],
    )
    subcategories = pd.DataFrame(
        [(1, 'Road Bikes', 1), (2, 'Helmets', 2), (3, 'Jerseys', 3)],
        columns=['subcategory_id', 'name', 'category_id'],
    )
    categories = pd.DataFrame(
        [(1, 'Bikes'), (2, 'Accessories'), (3, 'Clothing')],
        columns=['category_id', 'name'],
    )
    return {
        'territories': territories,
        'customers': customers,
        'orders': orders,
        'order_lines': order_lines,
        'products': products,
        'subcategories': subcategories,
        'categories': categories,
    }


def empty_frames() -> dict[str, pd.DataFrame]:
    return {name: frame.iloc[0:0] for name, frame in sample_frames().items()}


def write_source_database(path: Path, frames: dict[str, pd.DataFrame]) -> Path:
    """Write the frames using the source table and column names the loader queries."""
    renames = {
        'SalesTerritory': ('territories', {
            'territory_id': 'TerritoryID', 'name': 'Name', 'country_region_code': 'CountryRegionCode',
            'sales_ytd': 'SalesYTD', 'sales_last_year': 'SalesLastYear',
            'cost_ytd': 'CostYTD', 'cost_last_year': 'CostLastYear',
        }),
        'Customer': ('customers', {
            'customer_id': 'CustomerID', 'store_id': 'StoreID', 'territory_id': 'TerritoryID',
        }),
        'SalesOrderHeader': ('orders', {
            'order_id': 'SalesOrderID', 'customer_id': 'CustomerID', 'territory_id': 'TerritoryID',
            'order_date': 'OrderDate', 'total_due': 'TotalDue',
        }),
        'SalesOrderDetail': ('order_lines', {
            'order_id': 'SalesOrderID', 'product_id': 'ProductID', 'line_total': 'LineTotal',
        }),
        'Product': ('products', {
            'product_id': 'ProductID', 'name': 'Name', 'list_price': 'ListPrice',
            'standard_cost': 'StandardCost', 'subcategory_id': 'ProductSubcategoryID',
        }),
        'ProductSubcategory': ('subcategories', {
            'subcategory_id': 'ProductSubcategoryID', 'name': 'Name', 'category_id': 'ProductCategoryID',
        }),
        'ProductCategory': ('categories', {'category_id': 'ProductCategoryID', 'name': 'Name'}),
    }
    conn = sqlite3.connect(str(path))
    try:
        for table, (relation, columns) in renames.items():
            frame = frames[relation].rename(columns=columns)
            if table == 'SalesOrderDetail':
                frame.insert(1, 'SalesOrderDetailID', range(1, len(frame) + 1))
            frame.to_sql(table, conn, index=False)
        conn.commit()
    finally:
        conn.close()
    return path

