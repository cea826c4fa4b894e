"""
PostgreSQL Manager
Owns the connection pool and exposes generic query primitives
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

import psycopg2
from psycopg2 import pool
from psycopg2.extras import RealDictCursor
from loguru import logger

from core.config import DatabaseConfig


class DatabaseNotInitializedError(RuntimeError):
    """Raised when a query method is used before initialize()"""

    def __init__(self):
        super().__init__("Database not initialized. Call initialize() first.")


class PostgresManager:
    """
    PostgreSQL connection pool wrapper
    Handles pool lifecycle, parameterized queries and transactions
    """

    def __init__(self, config: DatabaseConfig):
        """
        Args:
            config: Validated database configuration
        """
        self.config = config
        self.pool: Optional[pool.ThreadedConnectionPool] = None
        self.database_name: Optional[str] = None
        self._lock = threading.RLock()

        logger.info(f"PostgreSQL Manager configured for {config.host}:{config.port}/{config.database}")

    @property
    def is_initialized(self) -> bool:
        return self.pool is not None and not self.pool.closed

    def initialize(self, database_name: Optional[str] = None):
        """
        Create the connection pool and verify connectivity once

        Calling again with the same database name is a no-op; a different
        name replaces the current pool.

        Args:
            database_name: Database to connect to (defaults to config.database)

        Raises:
            psycopg2.Error: If the database is unreachable
        """
        name = database_name or self.config.database
        with self._lock:
            if self.is_initialized and name == self.database_name:
                return

            if self.pool is not None:
                self.close()

            self._open_pool(name)

    def _open_pool(self, name: str):
        try:
            self.pool = pool.ThreadedConnectionPool(
                1,
                self.config.connection_limit,
                host=self.config.host,
                port=self.config.port,
                user=self.config.user,
                password=self.config.password,
                dbname=name,
                cursor_factory=RealDictCursor,
            )
            connection = self.pool.getconn()
            self.pool.putconn(connection)
        except psycopg2.Error as e:
            logger.error(f"❌ Failed to connect to PostgreSQL database {name}: {e}")
            if self.pool is not None:
                self.pool.closeall()
            self.pool = None
            self.database_name = None
            raise

        self.database_name = name
        logger.info(f"✅ Connected to PostgreSQL: {name} (pool limit {self.config.connection_limit})")

    def get_pool(self) -> pool.ThreadedConnectionPool:
        """Return the open pool or raise DatabaseNotInitializedError"""
        if not self.is_initialized:
            raise DatabaseNotInitializedError()
        return self.pool

    def for_database(self, database_name: str) -> "PostgresManager":
        """
        A separate single-connection manager for another database

        The returned manager is not initialized; use it as a context manager.
        """
        config = self.config.model_copy(update={"database": database_name, "connection_limit": 1})
        return PostgresManager(config)

    def _release(self, connection):
        """Hand a connection back to the pool, discarding it if broken"""
        if self.pool is None or self.pool.closed:
            connection.close()
            return
        self.pool.putconn(connection, close=bool(connection.closed))

    def _run(self, sql: str, params: Optional[Sequence[Any]], action: str, handler):
        db_pool = self.get_pool()
        connection = db_pool.getconn()
        try:
            with connection.cursor() as cursor:
                cursor.execute(sql, params)
                result = handler(cursor)
            connection.commit()
            return result
        except Exception as e:
            if not connection.closed:
                connection.rollback()
            logger.error(f"SQL {action} error: {e}")
            logger.error(f"SQL: {sql}")
            logger.error(f"Params: {params}")
            raise
        finally:
            self._release(connection)

    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        """
        Execute a parameterized statement and return all rows

        Args:
            sql: SQL with %s placeholders
            params: Values bound to the placeholders

        Returns:
            List of rows as dicts (empty if the statement returns no rows)
        """
        def fetch_all(cursor):
            if cursor.description is None:
                return []
            return [dict(row) for row in cursor.fetchall()]

        return self._run(sql, params, "query", fetch_all)

    def query_one(self, sql: str, params: Optional[Sequence[Any]] = None) -> Optional[Dict[str, Any]]:
        """Execute a query and return the first row, or None"""
        rows = self.query(sql, params)
        return rows[0] if rows else None

    def insert(self, sql: str, params: Optional[Sequence[Any]] = None) -> int:
        """
        Execute an INSERT ... RETURNING id and return the generated id

        Args:
            sql: INSERT statement ending in a RETURNING clause
            params: Values bound to the placeholders

        Returns:
            The first column of the returned row
        """
        def fetch_id(cursor):
            if cursor.description is None:
                raise ValueError("INSERT statement must end with a RETURNING clause")
            row = cursor.fetchone()
            return next(iter(row.values()))

        return self._run(sql, params, "insert", fetch_id)

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> int:
        """
        Execute an UPDATE/DELETE statement

        Returns:
            Number of affected rows
        """
        return self._run(sql, params, "execute", lambda cursor: cursor.rowcount)

    def begin_transaction(self):
        """
        Acquire a dedicated connection for a transaction

        psycopg2 opens the transaction implicitly on the first statement.
        The connection must be finished with commit_transaction() or
        rollback_transaction(), which both return it to the pool.

        Returns:
            A pooled psycopg2 connection
        """
        return self.get_pool().getconn()

    def commit_transaction(self, connection):
        """Commit and release the transaction connection"""
        try:
            connection.commit()
        finally:
            self._release(connection)

    def rollback_transaction(self, connection):
        """Roll back and release the transaction connection"""
        try:
            connection.rollback()
        finally:
            self._release(connection)

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """
        Context manager around begin/commit/rollback

        Commits when the block succeeds, rolls back when it raises.
        """
        connection = self.begin_transaction()
        try:
            yield connection
        except BaseException:
            self.rollback_transaction(connection)
            raise
        self.commit_transaction(connection)

    def test_connection(self) -> bool:
        """
        Check that the database answers a trivial query

        Returns:
            True if SELECT 1 succeeds, False otherwise
        """
        try:
            if not self.is_initialized:
                self.initialize()

            row = self.query_one("SELECT 1 AS test")
            return row is not None and row.get("test") == 1
        except Exception as e:
            logger.error(f"Database connection test failed: {e}")
            return False

    def get_databases(self) -> List[str]:
        """List databases on the server, templates excluded"""
        rows = self.query(
            "SELECT datname FROM pg_database WHERE datistemplate = false ORDER BY datname"
        )
        return [row["datname"] for row in rows]

    def get_tables(self, schema: str = "public") -> List[str]:
        """List base tables of a schema in the connected database"""
        rows = self.query(
            """
            SELECT table_name FROM information_schema.tables
            WHERE table_schema = %s AND table_type = 'BASE TABLE'
            ORDER BY table_name
            """,
            (schema,),
        )
        return [row["table_name"] for row in rows]

    def describe_table(self, table_name: str, schema: str = "public") -> List[Dict[str, Any]]:
        """
        Column metadata for a table

        Args:
            table_name: Table to describe
            schema: Schema holding the table

        Returns:
            One dict per column in ordinal order
        """
        return self.query(
            """
            SELECT column_name, data_type, is_nullable, column_default,
                   character_maximum_length
            FROM information_schema.columns
            WHERE table_schema = %s AND table_name = %s
            ORDER BY ordinal_position
            """,
            (schema, table_name),
        )

    def close(self):
        """Close every pooled connection"""
        with self._lock:
            if self.pool is None:
                return
            if not self.pool.closed:
                self.pool.closeall()
            self.pool = None
            self.database_name = None
        logger.info("Closed PostgreSQL connection pool")

    def __enter__(self):
        """Context manager entry"""
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()
