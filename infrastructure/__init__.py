# ============================================================================
# MODULE CONTEXT - INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Core Infrastructure - Database access
# PURPOSE: Shared PostgreSQL access for the collections and features APIs
# EXPORTS: PostgreSQLRepository, to_store_error
# DEPENDENCIES: psycopg, config
# ============================================================================

"""
Infrastructure Module

PostgreSQL connection management shared by the collection registry and the
feature query engine.
"""

from .postgresql import PostgreSQLRepository, to_store_error

__all__ = [
    "PostgreSQLRepository",
    "to_store_error"
]
