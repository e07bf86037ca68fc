"""Error kinds raised by the provisioning service.

Every error records the step of the run that failed so the CLI can report
it. All of them are fatal; nothing is retried.
"""

from __future__ import annotations

STEP_VALIDATE = "validate"
STEP_CONNECT = "connect"
STEP_CHECK_EXISTS = "check_exists"
STEP_CREATE = "create"
STEP_LOAD_SQL = "load_sql"
STEP_EXECUTE_SQL = "execute_sql"


class ProvisioningError(Exception):
    """Base class for failures of a provisioning run."""

    step = "unknown"

    def __init__(self, message: str, *, step: str | None = None) -> None:
        super().__init__(message)
        if step is not None:
            self.step = step


class InvalidDatabaseNameError(ProvisioningError, ValueError):
    """Raised when the database name is not a plain SQL identifier."""

    step = STEP_VALIDATE


class DatabaseConnectionError(ProvisioningError):
    step = STEP_CONNECT


class CatalogLookupError(ProvisioningError):
    step = STEP_CHECK_EXISTS


class DatabaseCreationError(ProvisioningError):
    step = STEP_CREATE


class SchemaFileError(ProvisioningError):
    """Raised when the schema file is missing or unreadable."""

    step = STEP_LOAD_SQL


class SchemaExecutionError(ProvisioningError):
    """Raised when the server rejects the schema batch."""

    step = STEP_EXECUTE_SQL
