from __future__ import annotations

import psycopg
import pytest
from psycopg import errors, sql

from pulsechain_db.infrastructure.db import (
    DatabaseClient,
    DatabaseError,
    DatabaseSettings,
    create_database_statement,
)
from pulsechain_db.infrastructure.db import connection as connection_module


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self.conn = conn
        self.description = None
        self.rowcount = -1
        self._rows: list[tuple] = []

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, *exc_info) -> None:
        return None

    def execute(self, statement, params=None) -> None:
        self.conn.executed.append((statement, params))
        if self.conn.error is not None:
            raise self.conn.error
        if params is not None:
            self.description = [("?column?",)]
            self._rows = [(1,)]
            self.rowcount = 1

    def fetchall(self) -> list[tuple]:
        return self._rows


class FakeConnection:
    def __init__(self) -> None:
        self.executed: list[tuple] = []
        self.error: Exception | None = None
        self.close_calls = 0

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def close(self) -> None:
        self.close_calls += 1


def test_connect_uses_autocommit_and_settings(monkeypatch) -> None:
    calls: list[dict] = []

    def fake_connect(**kwargs):
        calls.append(kwargs)
        return FakeConnection()

    monkeypatch.setattr(connection_module.psycopg, "connect", fake_connect)
    settings = DatabaseSettings(host="db", port=6543, user="explorer", password="pw")

    client = DatabaseClient.connect(settings, "postgres")

    assert calls == [
        {
            "host": "db",
            "port": 6543,
            "user": "explorer",
            "dbname": "postgres",
            "connect_timeout": 10,
            "password": "pw",
            "autocommit": True,
        }
    ]
    assert client.label == "explorer@db:6543/postgres"


def test_connect_failure_is_wrapped(monkeypatch) -> None:
    def refuse(**_kwargs):
        raise psycopg.OperationalError("connection refused")

    monkeypatch.setattr(connection_module.psycopg, "connect", refuse)

    with pytest.raises(DatabaseError, match="Failed to connect to postgres@localhost"):
        DatabaseClient.connect(DatabaseSettings())


def test_query_returns_rows_for_selects() -> None:
    client = DatabaseClient(FakeConnection())

    result = client.query("SELECT 1 FROM pg_database WHERE datname = %s", ["x"])

    assert result.rows == [(1,)]
    assert result.rowcount == 1


def test_query_without_rows_returns_empty_result() -> None:
    conn = FakeConnection()
    client = DatabaseClient(conn)

    result = client.query("CREATE TABLE a (id INT); CREATE TABLE b (id INT);")

    assert result.rows == []
    assert conn.executed == [("CREATE TABLE a (id INT); CREATE TABLE b (id INT);", None)]


def test_driver_errors_are_wrapped() -> None:
    conn = FakeConnection()
    conn.error = errors.SyntaxError('syntax error at or near "CREAT"')
    client = DatabaseClient(conn)

    with pytest.raises(DatabaseError, match="syntax error") as excinfo:
        client.query("CREAT TABLE x ();")

    assert isinstance(excinfo.value.__cause__, psycopg.Error)


def test_close_is_idempotent_and_blocks_queries() -> None:
    conn = FakeConnection()

    with DatabaseClient(conn, label="t") as client:
        pass
    client.close()

    assert conn.close_calls == 1
    with pytest.raises(DatabaseError, match="closed"):
        client.query("SELECT 1")


def test_create_statement_quotes_identifier() -> None:
    statement = create_database_statement("pulsechain_explorer")

    assert isinstance(statement, sql.Composed)
    assert "CREATE DATABASE" in repr(statement)
    assert "pulsechain_explorer" in repr(statement)
