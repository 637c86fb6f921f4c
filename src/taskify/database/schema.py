"""
Bootstrap DDL for the ``tasks`` table.

This creates the table when it is missing so that a development database and
the test suite have something to talk to. It does not alter existing tables.
"""

import logging

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    Table,
    Text,
    false,
    func,
)
from sqlalchemy.exc import SQLAlchemyError

from ..shared.exceptions import StoreError
from .query_gateway import QueryGateway

log = logging.getLogger(__name__)

metadata = MetaData()

tasks_table = Table(
    "tasks",
    metadata,
    Column(
        "id",
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    ),
    Column("title", Text, nullable=False),
    Column("finished", Boolean, nullable=False, server_default=false()),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
    ),
    sqlite_autoincrement=True,
)


async def create_schema(gateway: QueryGateway) -> None:
    """Create the ``tasks`` table if it does not exist yet."""
    try:
        async with gateway.engine.begin() as conn:
            await conn.run_sync(metadata.create_all, checkfirst=True)
    except (SQLAlchemyError, OSError) as e:
        raise StoreError(str(e), cause=e) from e
    log.info("Schema ready (dialect=%s)", gateway.dialect_name)
