# ============================================================================
# MODULE CONTEXT - POSTGRESQL REPOSITORY
# ============================================================================
# STATUS: Core Infrastructure - PostgreSQL connection management
# PURPOSE: Per-operation psycopg connections, read cursors and write transactions
# EXPORTS: PostgreSQLRepository, to_store_error
# DEPENDENCIES: psycopg, config, ogc_common.errors
# PATTERNS: Repository base class, Per-request connections, Error translation
# ============================================================================

"""
PostgreSQL Repository - Feature Store Access

Base class for the collections and features repositories:
- Connection string from config (password or managed identity)
- One connection per operation, closed immediately after use (no pooling,
  suitable for serverless Azure Functions)
- Read cursors with a statement timeout
- Write transactions: begin -> statement(s) -> commit, rollback on any error
- psycopg errors translated into StoreError before leaving this module

Usage:
    class FeatureRepository(PostgreSQLRepository):
        def count(self):
            with self._get_cursor() as cur:
                cur.execute("SELECT COUNT(*) AS count FROM data.features")
                return cur.fetchone()["count"]
"""

import logging
from contextlib import contextmanager
from http import HTTPStatus
from typing import Iterator, Optional

import psycopg
from psycopg import errors as pg_errors
from psycopg.rows import dict_row

from ogc_common.errors import StoreError

logger = logging.getLogger(__name__)


def to_store_error(exc: psycopg.Error) -> StoreError:
    """
    Translate a psycopg error into a StoreError with a client-facing status.

    Duplicate keys are conflicts (409); other constraint or data errors are
    the caller's fault (400); everything else is a server error (500).
    """
    if isinstance(exc, pg_errors.UniqueViolation):
        return StoreError(f"Duplicate identifier: {exc}", status=HTTPStatus.CONFLICT)
    if isinstance(exc, (psycopg.IntegrityError, psycopg.DataError)):
        return StoreError(f"Rejected by feature store: {exc}", status=HTTPStatus.BAD_REQUEST)
    return StoreError(f"Database query failed: {exc}")


class PostgreSQLRepository:
    """
    PostgreSQL repository base class with connection management.

    Connection Strategy:
    -------------------
    Each operation creates a NEW connection and closes it immediately after
    use. The engine therefore holds no state between requests.
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        statement_timeout_seconds: int = 30
    ):
        """
        Parameters:
        ----------
        connection_string : Optional[str]
            Explicit PostgreSQL connection string. If not provided, one is
            built from config for every new connection.

        statement_timeout_seconds : int
            Server-side timeout applied to read statements.
        """
        self._conn_string = connection_string
        self.statement_timeout_seconds = statement_timeout_seconds

    @property
    def conn_string(self) -> str:
        if self._conn_string:
            return self._conn_string
        from config import get_postgres_connection_string
        return get_postgres_connection_string()

    @contextmanager
    def _get_connection(self) -> Iterator[psycopg.Connection]:
        """
        Context manager for PostgreSQL database connections.

        1. Create connection (dict_row factory, autocommit OFF)
        2. Yield connection to caller
        3. On psycopg error: rollback, raise StoreError
        4. Always: close connection
        """
        conn = None
        try:
            conn = psycopg.connect(self.conn_string, row_factory=dict_row)
            logger.debug("🔗 PostgreSQL connection established")
            yield conn
        except psycopg.Error as e:
            logger.error(f"❌ PostgreSQL error ({type(e).__name__}): {e}")
            if conn is not None:
                try:
                    conn.rollback()
                except psycopg.Error as rollback_error:
                    logger.warning(f"Rollback failed: {rollback_error}")
            raise to_store_error(e) from e
        finally:
            if conn is not None:
                conn.close()
                logger.debug("🔒 Connection closed")

    @contextmanager
    def _get_cursor(self) -> Iterator[psycopg.Cursor]:
        """Read-only cursor with the configured statement timeout."""
        with self._get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT set_config('statement_timeout', %s, true)",
                    (f"{self.statement_timeout_seconds}s",)
                )
                yield cur

    @contextmanager
    def _transaction(self) -> Iterator[psycopg.Cursor]:
        """
        Write transaction.

        Commits when the block exits cleanly; any exception (psycopg or not)
        rolls back before propagating.
        """
        with self._get_connection() as conn:
            try:
                with conn.cursor() as cur:
                    yield cur
                conn.commit()
                logger.debug("✅ Transaction committed")
            except Exception:
                conn.rollback()
                logger.debug("↩️ Transaction rolled back")
                raise
