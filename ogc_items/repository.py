# ============================================================================
# MODULE CONTEXT - FEATURE REPOSITORY
# ============================================================================
# STATUS: Feature Engine - PostGIS data access
# PURPOSE: Count, page, read and write features in the shared features table
# EXPORTS: FeatureRepository, STORED_LINK_EXCLUDED_RELS
# DEPENDENCIES: psycopg, psycopg.sql, infrastructure.postgresql
# SOURCE: PostgreSQL/PostGIS table data.features (configurable)
# VALIDATION: SQL composition only; identifiers via sql.Identifier, values bound
# PATTERNS: Repository Pattern, SQL Composition
# ENTRY_POINTS: repo = FeatureRepository(); rows = repo.select_features(...)
# ============================================================================

"""
Feature Repository - PostGIS Direct Access

Table contract:

    data.features(
        id          text,
        collection  text,
        type        text,
        geometry    geometry,   -- stored in OGC_STORAGE_SRID
        properties  jsonb,
        links       jsonb
    )

Reads always project the geometry with ST_Transform into the requested SRID
and serialize it with ST_AsGeoJSON, so rows come back as GeoJSON-ready dicts.
Writes accept GeoJSON geometry (CRS84 / EPSG:4326) and store it in the
storage SRID. Each write is a single statement inside _transaction().
"""

import json
from typing import Any, Dict, List, Optional

from psycopg import sql
from psycopg.types.json import Jsonb

from infrastructure.postgresql import PostgreSQLRepository
from ogc_common.models import COLLECTION, SELF

from .config import FeaturesEngineConfig, get_items_config
from .filters import CollectionEquals, COLLECTION_COLUMN, Predicate
from .models import Feature

# Computed per request, never persisted
STORED_LINK_EXCLUDED_RELS = (SELF, COLLECTION)

GEOJSON_INPUT_SRID = 4326


class FeatureRepository(PostgreSQLRepository):
    """
    PostGIS repository for the features table.

    Every method opens its own connection (see PostgreSQLRepository); the
    executor calls count_features then select_features for a paged query.
    """

    def __init__(
        self,
        config: Optional[FeaturesEngineConfig] = None,
        connection_string: Optional[str] = None
    ):
        self.config = config or get_items_config()
        super().__init__(
            connection_string=connection_string,
            statement_timeout_seconds=self.config.query_timeout_seconds
        )

    # ========================================================================
    # SQL FRAGMENTS
    # ========================================================================

    @property
    def _table(self) -> sql.Identifier:
        return sql.Identifier(self.config.features_schema, self.config.features_table)

    def _select_columns(self) -> sql.Composed:
        """Feature columns with geometry re-projected to a bound SRID."""
        return sql.SQL(
            "id, type, ST_AsGeoJSON(ST_Transform({geom}, %s))::jsonb AS geometry, properties, links"
        ).format(geom=sql.Identifier(self.config.geometry_column))

    def _geometry_input(self) -> sql.SQL:
        """Bound GeoJSON text -> geometry in storage SRID."""
        return sql.SQL("ST_Transform(ST_SetSRID(ST_GeomFromGeoJSON(%s), %s), %s)")

    def _geometry_params(self, feature: Feature) -> List[Any]:
        geometry = json.dumps(feature.geometry) if feature.geometry is not None else None
        return [geometry, GEOJSON_INPUT_SRID, self.config.storage_srid]

    @staticmethod
    def _stored_links(feature: Feature) -> Optional[Jsonb]:
        if not feature.links:
            return None
        links = [
            link.model_dump(exclude_none=True)
            for link in feature.links
            if link.rel not in STORED_LINK_EXCLUDED_RELS
        ]
        return Jsonb(links) if links else None

    @staticmethod
    def _row_to_feature(row: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'type': row.get('type') or "Feature",
            'id': row['id'],
            'geometry': row.get('geometry'),
            'properties': row.get('properties') or {},
            'links': row.get('links')
        }

    # ========================================================================
    # QUERIES
    # ========================================================================

    def count_features(self, where: Predicate) -> int:
        """
        Number of rows matching the filter (no LIMIT/OFFSET).

        Returns:
            COUNT(*) over the filtered features
        """
        clause, params = where.render()
        query = sql.SQL("SELECT COUNT(*) AS count FROM {table} WHERE {where}").format(
            table=self._table,
            where=clause
        )

        with self._get_cursor() as cur:
            cur.execute(query, params)
            result = cur.fetchone()
            return result['count'] if result else 0

    def select_features(
        self,
        where: Predicate,
        target_srid: int,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Dict[str, Any]]:
        """
        Filtered features ordered by id.

        Args:
            where: Predicate tree from the filter assembler
            target_srid: SRID of returned geometries
            limit: Page size; None returns every matching row
            offset: Rows to skip (only applied with a limit)

        Returns:
            List of GeoJSON feature dicts
        """
        clause, where_params = where.render()
        query = sql.SQL("SELECT {columns} FROM {table} WHERE {where} ORDER BY id ASC").format(
            columns=self._select_columns(),
            table=self._table,
            where=clause
        )
        params: List[Any] = [target_srid, *where_params]

        if limit is not None:
            query = sql.Composed([query, sql.SQL(" LIMIT %s OFFSET %s")])
            params.extend([limit, offset])

        with self._get_cursor() as cur:
            cur.execute(query, params)
            rows = cur.fetchall()

        return [self._row_to_feature(row) for row in rows]

    def get_feature(
        self,
        collection_id: str,
        feature_id: str,
        target_srid: int
    ) -> Optional[Dict[str, Any]]:
        """
        Single feature by id within a collection.

        Returns:
            GeoJSON feature dict or None if not found
        """
        clause, where_params = CollectionEquals(COLLECTION_COLUMN, collection_id).render()
        query = sql.SQL("SELECT {columns} FROM {table} WHERE {where} AND id = %s").format(
            columns=self._select_columns(),
            table=self._table,
            where=clause
        )

        with self._get_cursor() as cur:
            cur.execute(query, [target_srid, *where_params, feature_id])
            row = cur.fetchone()

        return self._row_to_feature(row) if row else None

    # ========================================================================
    # WRITES
    # ========================================================================

    def insert_feature(self, collection_id: str, feature: Feature) -> Dict[str, Any]:
        """
        Insert one feature into a collection.

        Raises:
            StoreError: 409 when the id already exists
        """
        query = sql.SQL("""
            INSERT INTO {table} (id, collection, type, {geom}, properties, links)
            VALUES (%s, %s, %s, {geometry}, %s, %s)
            RETURNING {columns}
        """).format(
            table=self._table,
            geom=sql.Identifier(self.config.geometry_column),
            geometry=self._geometry_input(),
            columns=self._select_columns()
        )
        params = [
            feature.id,
            collection_id,
            feature.type,
            *self._geometry_params(feature),
            Jsonb(feature.properties),
            self._stored_links(feature),
            GEOJSON_INPUT_SRID
        ]

        with self._transaction() as cur:
            cur.execute(query, params)
            row = cur.fetchone()

        return self._row_to_feature(row)

    def replace_feature(
        self,
        collection_id: str,
        feature_id: str,
        feature: Feature
    ) -> Optional[Dict[str, Any]]:
        """
        Full replacement of an existing feature.

        Returns:
            Stored feature dict, or None when no row matched
        """
        query = sql.SQL("""
            UPDATE {table}
            SET type = %s, {geom} = {geometry}, properties = %s, links = %s
            WHERE collection = %s AND id = %s
            RETURNING {columns}
        """).format(
            table=self._table,
            geom=sql.Identifier(self.config.geometry_column),
            geometry=self._geometry_input(),
            columns=self._select_columns()
        )
        params = [
            feature.type,
            *self._geometry_params(feature),
            Jsonb(feature.properties),
            self._stored_links(feature),
            collection_id,
            feature_id,
            GEOJSON_INPUT_SRID
        ]

        with self._transaction() as cur:
            cur.execute(query, params)
            row = cur.fetchone()

        return self._row_to_feature(row) if row else None

    def delete_feature(self, collection_id: str, feature_id: str) -> bool:
        """
        Delete a feature.

        Returns:
            True if a row was removed, False if none matched
        """
        query = sql.SQL("DELETE FROM {table} WHERE collection = %s AND id = %s").format(
            table=self._table
        )

        with self._transaction() as cur:
            cur.execute(query, (collection_id, feature_id))
            deleted = cur.rowcount > 0

        return deleted
