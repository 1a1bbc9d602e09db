# ============================================================================
# MODULE CONTEXT - COLLECTION REPOSITORY
# ============================================================================
# STATUS: Collection Registry - PostgreSQL data access
# PURPOSE: CRUD on the collection metadata table
# EXPORTS: CollectionRepository
# DEPENDENCIES: psycopg, psycopg.sql, infrastructure.postgresql
# SOURCE: PostgreSQL table meta.collections (configurable)
# PATTERNS: Repository Pattern, SQL Composition
# ============================================================================

"""
Collection Repository

Table contract:

    meta.collections(
        id          text primary key,
        collection  jsonb
    )

Documents go in and come out as plain dicts; the registry owns validation
and link handling.
"""

from typing import Any, Dict, List, Optional

from psycopg import sql
from psycopg.types.json import Jsonb

from infrastructure.postgresql import PostgreSQLRepository

from .config import CollectionsConfig, get_collections_config


class CollectionRepository(PostgreSQLRepository):
    """PostgreSQL repository for collection metadata documents."""

    def __init__(
        self,
        config: Optional[CollectionsConfig] = None,
        connection_string: Optional[str] = None
    ):
        self.config = config or get_collections_config()
        super().__init__(
            connection_string=connection_string,
            statement_timeout_seconds=self.config.query_timeout_seconds
        )

    @property
    def _table(self) -> sql.Identifier:
        return sql.Identifier(self.config.collections_schema, self.config.collections_table)

    def list_collections(self) -> List[Dict[str, Any]]:
        query = sql.SQL("SELECT collection FROM {table} ORDER BY id ASC").format(table=self._table)

        with self._get_cursor() as cur:
            cur.execute(query)
            rows = cur.fetchall()

        return [row['collection'] for row in rows]

    def get_collection(self, collection_id: str) -> Optional[Dict[str, Any]]:
        query = sql.SQL("SELECT collection FROM {table} WHERE id = %s").format(table=self._table)

        with self._get_cursor() as cur:
            cur.execute(query, (collection_id,))
            row = cur.fetchone()

        return row['collection'] if row else None

    def insert_collection(self, collection_id: str, document: Dict[str, Any]) -> None:
        """
        Raises:
            StoreError: 409 when the id already exists
        """
        query = sql.SQL("INSERT INTO {table} (id, collection) VALUES (%s, %s)").format(
            table=self._table
        )

        with self._transaction() as cur:
            cur.execute(query, (collection_id, Jsonb(document)))

    def update_collection(self, collection_id: str, document: Dict[str, Any]) -> bool:
        """
        Returns:
            True if the collection existed and was replaced
        """
        query = sql.SQL("UPDATE {table} SET collection = %s WHERE id = %s").format(
            table=self._table
        )

        with self._transaction() as cur:
            cur.execute(query, (Jsonb(document), collection_id))
            updated = cur.rowcount > 0

        return updated

    def delete_collection(self, collection_id: str) -> bool:
        """
        Returns:
            True if a row was removed, False if none matched
        """
        query = sql.SQL("DELETE FROM {table} WHERE id = %s").format(table=self._table)

        with self._transaction() as cur:
            cur.execute(query, (collection_id,))
            deleted = cur.rowcount > 0

        return deleted
