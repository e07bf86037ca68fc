from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import pytest
from psycopg import sql

from pulsechain_db.infrastructure.db import DatabaseError, DatabaseSettings, QueryResult

_CREATE_RE = re.compile(r'^CREATE DATABASE "((?:[^"]|"")+)"$')


@dataclass
class FakeClient:
    """Stand-in for DatabaseClient that records queries and close calls."""

    server: "FakeServer"
    database: str
    queries: list[tuple[Any, Any]] = field(default_factory=list)
    close_calls: int = 0

    def query(self, statement, params=None) -> QueryResult:
        self.queries.append((statement, params))
        return self.server.handle(self, statement, params)

    def close(self) -> None:
        self.close_calls += 1


class FakeServer:
    """In-memory PostgreSQL server double keyed by database name."""

    def __init__(self, databases: set[str] | None = None) -> None:
        self.databases = set(databases or {"postgres"})
        self.clients: list[FakeClient] = []
        self.applied: dict[str, list[str]] = {}
        self.refuse_connections = False
        self.unreachable: set[str] = set()
        self.fail_create: str | None = None
        self.fail_schema: str | None = None

    def connect(self, settings: DatabaseSettings, database: str | None = None) -> FakeClient:
        if self.refuse_connections:
            raise DatabaseError("connection refused")
        name = database or settings.database
        if name in self.unreachable:
            raise DatabaseError(f"could not connect to \"{name}\"")
        if name not in self.databases:
            raise DatabaseError(f'database "{name}" does not exist')
        client = FakeClient(self, name)
        self.clients.append(client)
        return client

    def handle(self, client: FakeClient, statement, params) -> QueryResult:
        if params is not None:
            rows = [(1,)] if params[0] in self.databases else []
            return QueryResult(rows=rows, rowcount=len(rows))
        if isinstance(statement, str):
            if self.fail_schema:
                raise DatabaseError(self.fail_schema)
            self.applied.setdefault(client.database, []).append(statement)
            return QueryResult()
        assert isinstance(statement, sql.Composed)
        match = _CREATE_RE.match(statement.as_string())
        assert match is not None, statement
        if self.fail_create:
            raise DatabaseError(self.fail_create)
        self.databases.add(match.group(1).replace('""', '"'))
        return QueryResult()

    @property
    def creates(self) -> list[Any]:
        return [
            statement
            for client in self.clients
            for statement, params in client.queries
            if params is None and not isinstance(statement, str)
        ]


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "create.tables.sql"
    path.write_text(
        "CREATE TABLE IF NOT EXISTS blocks (number BIGINT PRIMARY KEY);\n"
        "CREATE INDEX IF NOT EXISTS idx_blocks_number ON blocks (number);\n",
        encoding="utf-8",
    )
    return path
