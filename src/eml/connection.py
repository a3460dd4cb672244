"""Relational read interface consumed by the EML pipeline.

The pipeline borrows a read scope from its caller and never opens,
commits, rolls back or closes it. ``ReadConnection`` is the narrow
interface the fetchers depend on; ``PsycopgReadConnection`` adapts a
``psycopg.AsyncConnection`` to it.

Usage::

    async with connect(dsn) as connection:
        xml = await produce_eml(42, connection)
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Protocol

import psycopg
from psycopg.rows import dict_row

from src.eml.queries import SqlStatement

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    """Rows returned by one statement, as column-name dicts."""
    rows: list[dict] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)


class ReadConnection(Protocol):
    """Anything that can execute a ``SqlStatement`` and return its rows."""

    async def query(self, statement: SqlStatement) -> QueryResult:
        ...


class PsycopgReadConnection:
    """``ReadConnection`` over a borrowed ``psycopg.AsyncConnection``.

    Concurrent ``query`` calls are safe: psycopg serializes operations on
    a single connection, so the fan-out phase of the assembler interleaves
    without sharing a cursor.

    Args:
        connection: An open async connection. Its transaction lifecycle
            stays with the caller.
    """

    def __init__(self, connection: psycopg.AsyncConnection):
        self._connection = connection

    async def query(self, statement: SqlStatement) -> QueryResult:
        logger.debug("Executing %s with %s", statement.name, statement.params)
        async with self._connection.cursor(row_factory=dict_row) as cur:
            await cur.execute(statement.query, statement.params)
            rows = await cur.fetchall()
        return QueryResult(rows=list(rows))


@asynccontextmanager
async def connect(dsn: str) -> AsyncIterator[PsycopgReadConnection]:
    """Open a read-only connection for standalone (CLI) use.

    The transaction is rolled back on exit; nothing in the pipeline writes.
    """
    conn = await psycopg.AsyncConnection.connect(dsn, row_factory=dict_row)
    try:
        await conn.set_read_only(True)
        yield PsycopgReadConnection(conn)
    finally:
        await conn.rollback()
        await conn.close()
