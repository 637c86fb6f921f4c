"""
Database access for Taskify: the shared connection pool and the table schema.
"""

from .query_gateway import (
    QueryGateway,
    QueryResult,
    get_gateway,
    shutdown_gateway,
)
from .schema import create_schema, metadata, tasks_table

__all__ = [
    "QueryGateway",
    "QueryResult",
    "get_gateway",
    "shutdown_gateway",
    "create_schema",
    "metadata",
    "tasks_table",
]
