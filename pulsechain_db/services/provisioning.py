"""Provision the explorer database and apply the bundled table schema.

A provisioning run is a straight line::

    CHECK_EXISTS -> (CREATE_IF_ABSENT)? -> LOAD_SQL -> EXECUTE_SQL -> CLOSE

Any step may fail, which ends the run. Nothing is retried or rolled back: a
database created before a schema failure stays in place. Every connection the
run opens is closed exactly once.

The catalog lookup and ``CREATE DATABASE`` run on a connection to the
server's maintenance database, since a client cannot connect to a database
that does not exist yet. The schema file is read only once a second
connection, to the target database, is open, and the batch runs on that
connection.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable

from pulsechain_db.infrastructure.db import (
    DatabaseClient,
    DatabaseError,
    DatabaseSettings,
    create_database_statement,
    get_client,
)
from pulsechain_db.infrastructure.observability import get_logger, log_context
from pulsechain_db.services.dto import (
    DatabaseStatusDTO,
    EventPayload,
    EventPublisher,
    ProvisioningResultDTO,
    noop_event_publisher,
)
from pulsechain_db.services.errors import (
    CatalogLookupError,
    DatabaseConnectionError,
    DatabaseCreationError,
    InvalidDatabaseNameError,
    SchemaExecutionError,
    SchemaFileError,
)

ClientFactory = Callable[[DatabaseSettings, "str | None"], DatabaseClient]

SCHEMA_FILENAME = "create.tables.sql"
DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parents[1] / "sql" / SCHEMA_FILENAME

CATALOG_LOOKUP_SQL = "SELECT 1 FROM pg_database WHERE datname = %s"

# PostgreSQL truncates identifiers longer than NAMEDATALEN - 1 bytes
MAX_IDENTIFIER_BYTES = 63
_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_$]*")

_logger = get_logger(__name__)


def validate_database_name(name: str) -> str:
    """Return ``name`` if it is a plain identifier, else raise.

    Database names cannot be bound as query parameters, so they are checked
    against an allow-list before they reach any statement text.
    """

    if not name or not _IDENTIFIER_RE.fullmatch(name):
        raise InvalidDatabaseNameError(
            f"Invalid database name {name!r}: use letters, digits, underscores and $, "
            "starting with a letter or underscore"
        )
    if len(name.encode("utf-8")) > MAX_IDENTIFIER_BYTES:
        raise InvalidDatabaseNameError(
            f"Invalid database name {name!r}: longer than {MAX_IDENTIFIER_BYTES} bytes"
        )
    return name


def database_exists(client: DatabaseClient, name: str) -> bool:
    """Look ``name`` up in ``pg_database``."""

    try:
        result = client.query(CATALOG_LOOKUP_SQL, [name])
    except DatabaseError as exc:
        raise CatalogLookupError(f"Catalog lookup for {name!r} failed: {exc}") from exc
    return len(result.rows) > 0


def create_database(client: DatabaseClient, name: str) -> None:
    try:
        client.query(create_database_statement(validate_database_name(name)))
    except DatabaseError as exc:
        raise DatabaseCreationError(f"Could not create database {name!r}: {exc}") from exc


def read_schema(path: Path | str) -> str:
    """Return the schema file's full text. The SQL is not parsed or checked."""

    schema_path = Path(path)
    try:
        return schema_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise SchemaFileError(f"Schema file not found: {schema_path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise SchemaFileError(f"Could not read schema file {schema_path}: {exc}") from exc


def apply_schema(client: DatabaseClient, schema_text: str) -> None:
    """Submit the whole schema text as one request."""

    try:
        client.query(schema_text)
    except DatabaseError as exc:
        raise SchemaExecutionError(f"Schema execution failed: {exc}") from exc


class ProvisioningService:
    """Run the create-if-missing and apply-schema sequence for one database.

    Uses the connection factory pattern so tests can hand in fake clients.
    Progress is reported through ``event_publisher`` as small dict payloads
    whose ``type`` is one of ``database_missing``, ``database_created``,
    ``database_exists``, ``schema_started`` and ``schema_applied``.
    """

    def __init__(
        self,
        settings: DatabaseSettings,
        *,
        schema_path: Path | str | None = None,
        client_factory: ClientFactory = get_client,
        event_publisher: EventPublisher | None = None,
    ) -> None:
        self.settings = settings
        self.schema_path = Path(schema_path) if schema_path is not None else DEFAULT_SCHEMA_PATH
        self._client_factory = client_factory
        self._event_publisher = event_publisher or noop_event_publisher

    def _publish(self, event_type: str, **fields: object) -> None:
        payload: EventPayload = {"type": event_type, **fields}
        self._event_publisher(payload)

    def _open(self, database: str) -> DatabaseClient:
        try:
            return self._client_factory(self.settings, database)
        except DatabaseError as exc:
            raise DatabaseConnectionError(str(exc)) from exc

    def check(self) -> DatabaseStatusDTO:
        """Report whether the target database exists, without changing anything."""

        name = validate_database_name(self.settings.database)
        with log_context(database=name):
            admin = self._open(self.settings.admin_database)
            try:
                exists = database_exists(admin, name)
            finally:
                admin.close()
        return DatabaseStatusDTO(
            database_name=name,
            exists=exists,
            server=f"{self.settings.host}:{self.settings.port}",
        )

    def run(self) -> ProvisioningResultDTO:
        name = validate_database_name(self.settings.database)
        with log_context(database=name):
            _logger.info("Provisioning database on %s", self.settings.describe(name))

            admin = self._open(self.settings.admin_database)
            try:
                if database_exists(admin, name):
                    created = False
                    self._publish("database_exists", database=name)
                else:
                    self._publish("database_missing", database=name)
                    create_database(admin, name)
                    created = True
                    _logger.info("Created database")
                    self._publish("database_created", database=name)
            finally:
                admin.close()

            target = self._open(name)
            try:
                schema_text = read_schema(self.schema_path)
                self._publish("schema_started", path=str(self.schema_path))
                apply_schema(target, schema_text)
            finally:
                target.close()
            _logger.info("Applied schema from %s", self.schema_path)
            self._publish("schema_applied", path=str(self.schema_path))

        return ProvisioningResultDTO(
            database_name=name,
            created=created,
            schema_path=str(self.schema_path),
            schema_bytes=len(schema_text.encode("utf-8")),
        )


def setup_database(
    settings: DatabaseSettings,
    *,
    schema_path: Path | str | None = None,
    client_factory: ClientFactory = get_client,
    event_publisher: EventPublisher | None = None,
) -> ProvisioningResultDTO:
    """Ensure the configured database exists and apply the schema to it."""

    service = ProvisioningService(
        settings,
        schema_path=schema_path,
        client_factory=client_factory,
        event_publisher=event_publisher,
    )
    return service.run()
