"""
SQL queries reading the report input relations
Designed for the flattened sales schema (one table per source relation).
Columns are aliased to the snake_case names InputRelations expects and rows
come back in primary-key order so bucketing ties break the same way on every run.
"""

# ============================================
# SALES
# ============================================

QUERY_TERRITORIES = """
SELECT
    TerritoryID AS territory_id,
    Name AS name,
    CountryRegionCode AS country_region_code,
    SalesYTD AS sales_ytd,
    SalesLastYear AS sales_last_year,
    CostYTD AS cost_ytd,
    CostLastYear AS cost_last_year
FROM SalesTerritory
ORDER BY TerritoryID
"""

QUERY_CUSTOMERS = """
SELECT
    CustomerID AS customer_id,
    StoreID AS store_id,
    TerritoryID AS territory_id
FROM Customer
ORDER BY CustomerID
"""

QUERY_ORDERS = """
SELECT
    SalesOrderID AS order_id,
    CustomerID AS customer_id,
    TerritoryID AS territory_id,
    OrderDate AS order_date,
    TotalDue AS total_due
FROM SalesOrderHeader
ORDER BY SalesOrderID
"""

QUERY_ORDER_LINES = """
SELECT
    SalesOrderID AS order_id,
    ProductID AS product_id,
    LineTotal AS line_total
FROM SalesOrderDetail
ORDER BY SalesOrderID, SalesOrderDetailID
"""

# ============================================
# PRODUCTION
# ============================================

QUERY_PRODUCTS = """
SELECT
    ProductID AS product_id,
    Name AS name,
    ListPrice AS list_price,
    StandardCost AS standard_cost,
    ProductSubcategoryID AS subcategory_id
FROM Product
ORDER BY ProductID
"""

QUERY_SUBCATEGORIES = """
SELECT
    ProductSubcategoryID AS subcategory_id,
    Name AS name,
    ProductCategoryID AS category_id
FROM ProductSubcategory
ORDER BY ProductSubcategoryID
"""

QUERY_CATEGORIES = """
SELECT
    ProductCategoryID AS category_id,
    Name AS name
FROM ProductCategory
ORDER BY ProductCategoryID
"""

# relation name -> query, in load order
RELATION_QUERIES = {
    'territories': QUERY_TERRITORIES,
    'customers': QUERY_CUSTOMERS,
    'orders': QUERY_ORDERS,
    'order_lines': QUERY_ORDER_LINES,
    'products': QUERY_PRODUCTS,
    'subcategories': QUERY_SUBCATEGORIES,
    'categories': QUERY_CATEGORIES,
}
