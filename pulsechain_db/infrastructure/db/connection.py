from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

import psycopg
from psycopg import sql

from pulsechain_db.infrastructure.observability import get_logger

from .config import DatabaseSettings

_logger = get_logger(__name__)


class DatabaseError(Exception):
    """Custom exception for database connection and query errors."""


@dataclass
class QueryResult:
    """Rows and row count returned by :meth:`DatabaseClient.query`."""

    rows: list[tuple[Any, ...]] = field(default_factory=list)
    rowcount: int = -1


class DatabaseClient:
    """Thin wrapper around a single autocommit psycopg connection.

    Exposes ``query`` and ``close``, which is all the provisioner needs.
    ``close`` is idempotent and the client is a context manager.
    """

    def __init__(self, connection: psycopg.Connection, *, label: str = "") -> None:
        self._conn = connection
        self.label = label
        self.closed = False

    @classmethod
    def connect(
        cls, settings: DatabaseSettings, database: str | None = None
    ) -> "DatabaseClient":
        """Open an autocommit connection to ``database`` (default: the target)."""

        label = settings.describe(database)
        _logger.debug("Connecting to %s", label)
        try:
            # CREATE DATABASE cannot run inside a transaction block
            conn = psycopg.connect(**settings.connect_kwargs(database), autocommit=True)
        except psycopg.Error as exc:
            raise DatabaseError(f"Failed to connect to {label}: {exc}") from exc
        return cls(conn, label=label)

    def query(self, statement, params: Sequence[Any] | None = None) -> QueryResult:
        """Execute ``statement`` and return any rows it produced.

        Without ``params`` the text is sent as-is, so it may hold several
        ``;``-separated statements.
        """

        if self.closed:
            raise DatabaseError(f"Connection to {self.label} is closed")
        try:
            with self._conn.cursor() as cur:
                cur.execute(statement, params)
                rows = cur.fetchall() if cur.description is not None else []
                return QueryResult(rows=list(rows), rowcount=cur.rowcount)
        except psycopg.Error as exc:
            raise DatabaseError(str(exc).strip() or exc.__class__.__name__) from exc

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        _logger.debug("Closing connection to %s", self.label)
        self._conn.close()

    def __enter__(self) -> "DatabaseClient":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()


def get_client(settings: DatabaseSettings, database: str | None = None) -> DatabaseClient:
    """Production connection factory used by the provisioner and the CLI."""

    return DatabaseClient.connect(settings, database)


def create_database_statement(name: str) -> sql.Composed:
    """Return ``CREATE DATABASE <name>`` with the name quoted by the driver."""

    return sql.SQL("CREATE DATABASE {}").format(sql.Identifier(name))
