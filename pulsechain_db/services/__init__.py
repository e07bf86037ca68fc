"""Service layer: the provisioning run and its DTOs and error kinds."""

from .dto import DatabaseStatusDTO, EventPayload, EventPublisher, ProvisioningResultDTO
from .errors import (
    CatalogLookupError,
    DatabaseConnectionError,
    DatabaseCreationError,
    InvalidDatabaseNameError,
    ProvisioningError,
    SchemaExecutionError,
    SchemaFileError,
)
from .provisioning import (
    DEFAULT_SCHEMA_PATH,
    ProvisioningService,
    apply_schema,
    create_database,
    database_exists,
    read_schema,
    setup_database,
    validate_database_name,
)

__all__ = [
    "CatalogLookupError",
    "DEFAULT_SCHEMA_PATH",
    "DatabaseConnectionError",
    "DatabaseCreationError",
    "DatabaseStatusDTO",
    "EventPayload",
    "EventPublisher",
    "InvalidDatabaseNameError",
    "ProvisioningError",
    "ProvisioningResultDTO",
    "ProvisioningService",
    "SchemaExecutionError",
    "SchemaFileError",
    "apply_schema",
    "create_database",
    "database_exists",
    "read_schema",
    "setup_database",
    "validate_database_name",
]
