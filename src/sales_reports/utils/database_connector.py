"""
Database Connector for the sales reports
Handles SQLite connections, query execution and snapshot loading
"""

import logging
import sqlite3
import threading
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from sales_reports.queries import RELATION_QUERIES
from sales_reports.relations import InputRelations

logger = logging.getLogger(__name__)

SOURCE_TABLES = [
    'SalesTerritory', 'Customer', 'SalesOrderHeader', 'SalesOrderDetail',
    'Product', 'ProductSubcategory', 'ProductCategory',
]


class QueryExecutionError(RuntimeError):
    """A query failed against the source database"""


class DatabaseConnector:
    """Manages thread-safe connection to the sales database"""

    def __init__(self, db_path: Union[str, Path]):
        """
        Initialize database connector

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)

        if not self.db_path.exists():
            raise FileNotFoundError(f"Database not found: {self.db_path}")

        # Thread-local storage for connections
        self._local = threading.local()

    def connect(self) -> sqlite3.Connection:
        """
        Establish thread-safe database connection
        Each thread gets its own connection
        """
        if getattr(self._local, 'connection', None) is None:
            self._local.connection = sqlite3.connect(str(self.db_path))
        return self._local.connection

    def execute_query(self, query: str, params: Optional[tuple] = None) -> pd.DataFrame:
        """
        Execute SQL query and return results as DataFrame

        Args:
            query: SQL query string
            params: Optional query parameters for parameterized queries

        Returns:
            pd.DataFrame: Query results
        """
        conn = self.connect()

        try:
            if params:
                return pd.read_sql_query(query, conn, params=params)
            return pd.read_sql_query(query, conn)
        except (sqlite3.Error, pd.errors.DatabaseError) as e:
            raise QueryExecutionError(f"Query execution failed: {e}\nQuery: {query}") from e

    def get_table_list(self) -> List[str]:
        """Get list of all tables in database"""
        query = "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
        result = self.execute_query(query)
        return result['name'].tolist()

    def get_row_count(self, table_name: str) -> int:
        """Get total row count for a table"""
        if table_name not in self.get_table_list():
            raise QueryExecutionError(f"Unknown table: {table_name}")
        result = self.execute_query(f'SELECT COUNT(*) AS count FROM "{table_name}"')
        return int(result['count'].iloc[0])

    def load_relations(self) -> InputRelations:
        """
        Read every input relation from one consistent snapshot

        All SELECTs run inside a single read transaction, so tables joined
        later by the reports cannot come from different points in time.

        Returns:
            InputRelations: validated snapshot

        Raises:
            QueryExecutionError: a source table is missing or a query fails
        """
        missing = sorted(set(SOURCE_TABLES) - set(self.get_table_list()))
        if missing:
            raise QueryExecutionError(f"Source tables not found: {', '.join(missing)}")

        conn = self.connect()
        conn.execute('BEGIN')
        try:
            frames = {name: self.execute_query(query) for name, query in RELATION_QUERIES.items()}
        finally:
            conn.rollback()

        logger.info(
            f"Loaded snapshot from {self.db_path}: "
            + ", ".join(f"{name}={len(df):,}" for name, df in frames.items())
        )
        return InputRelations.from_frames(**frames)

    def close(self):
        """Close thread-specific database connection"""
        if getattr(self._local, 'connection', None) is not None:
            self._local.connection.close()
            self._local.connection = None

    def __enter__(self):
        """Context manager entry"""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()
