"""
Query gateway: one shared async connection pool and parameterized execution.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from sqlalchemy import pool, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.sql.elements import TextClause
from sqlalchemy.sql.selectable import TextualSelect

from ..config import DatabaseSettings
from ..shared.exceptions import StoreError

log = logging.getLogger(__name__)

Statement = Union[str, TextClause, TextualSelect]


@dataclass
class QueryResult:
    """Materialized outcome of a single statement."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0
    lastrowid: Optional[int] = None

    def first(self) -> Optional[dict[str, Any]]:
        return self.rows[0] if self.rows else None


class QueryGateway:
    """
    Executes SQL text with named parameters over a lazily created pool.

    The engine (and with it the pool) is created on first use and shared by
    every caller until ``close()``. Parameters are always bound by the driver;
    statement text is never built from values. Store-level failures are
    wrapped in ``StoreError`` and never retried.
    """

    def __init__(self, settings: DatabaseSettings):
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def _create_engine(self) -> AsyncEngine:
        url = self._settings.sqlalchemy_url()
        backend = url.get_backend_name()

        engine_kwargs: dict[str, Any] = {"echo": self._settings.echo}

        if backend == "sqlite":
            if url.database in (None, "", ":memory:"):
                engine_kwargs["poolclass"] = pool.StaticPool
                engine_kwargs["connect_args"] = {"check_same_thread": False}
                log.info("Configuring in-memory SQLite database (single-connection mode)")
            else:
                log.info("Configuring SQLite database file %s", url.database)
        else:
            engine_kwargs.update(
                pool_size=self._settings.pool_max,
                max_overflow=0,
                pool_timeout=self._settings.pool_timeout_seconds,
                pool_recycle=int(self._settings.idle_timeout_seconds),
                pool_pre_ping=True,
            )
            log.info(
                "Connecting to %s database %s on %s:%s as %s (pool max=%d, min=%d)",
                backend,
                url.database,
                url.host,
                url.port or "default",
                url.username or "<default user>",
                self._settings.pool_max,
                self._settings.pool_min,
            )

        return create_async_engine(url, **engine_kwargs)

    async def start(self) -> None:
        """Create the pool and open ``pool_min`` connections ahead of demand."""
        engine = self.engine
        if self._settings.pool_min <= 0 or engine.dialect.name == "sqlite":
            return

        async def _open_one():
            async with engine.connect():
                pass

        try:
            await asyncio.gather(
                *(_open_one() for _ in range(self._settings.pool_min))
            )
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(str(e), cause=e) from e
        log.info("Opened %d pooled connections", self._settings.pool_min)

    def supports_returning(self, kind: str) -> bool:
        """Whether the dialect can return rows from ``insert`` or ``update``."""
        dialect = self.engine.dialect
        if kind == "insert":
            return bool(getattr(dialect, "insert_returning", False))
        if kind == "update":
            return bool(getattr(dialect, "update_returning", False))
        raise ValueError(f"Unknown statement kind: {kind}")

    async def execute(
        self,
        statement: Statement,
        params: Optional[Mapping[str, Any]] = None,
        *,
        lastrowid: bool = False,
    ) -> QueryResult:
        """
        Execute one statement in its own transaction.

        Args:
            statement: SQL text or a ``text()`` clause using ``:name`` parameters.
            params: Values for the named parameters.
            lastrowid: Also report the driver's last inserted row id.

        Returns:
            QueryResult with the returned rows (if any) and affected row count.

        Raises:
            StoreError: On any connection, query, constraint or parameter
                binding failure.
        """
        if isinstance(statement, str):
            statement = text(statement)

        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(statement, dict(params or {}))
                rows = (
                    [dict(row) for row in result.mappings().all()]
                    if result.returns_rows
                    else []
                )
                return QueryResult(
                    rows=rows,
                    rowcount=result.rowcount,
                    lastrowid=result.lastrowid if lastrowid else None,
                )
        except (SQLAlchemyError, OSError, OverflowError, ValueError) as e:
            log.error("SQL error: %s", e)
            raise StoreError(str(e), cause=e) from e

    async def close(self) -> None:
        """Dispose of the pool. Safe to call more than once."""
        if self._engine is None:
            return
        engine, self._engine = self._engine, None
        await engine.dispose()
        log.info("Database pool closed")


_gateway: Optional[QueryGateway] = None


def get_gateway(settings: Optional[DatabaseSettings] = None) -> QueryGateway:
    """
    Return the process-wide gateway, creating it on first use.

    ``settings`` is only consulted when the gateway does not exist yet.
    """
    global _gateway
    if _gateway is None:
        _gateway = QueryGateway(settings or DatabaseSettings())
    return _gateway


async def shutdown_gateway() -> None:
    """Close and forget the process-wide gateway."""
    global _gateway
    if _gateway is not None:
        gateway, _gateway = _gateway, None
        await gateway.close()
