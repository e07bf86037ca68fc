"""
Centralized DTOs and event types for the provisioning service.
"""

from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel
from pydantic import ConfigDict

# --- Event Publishing Types ---
EventPayload = dict[str, object]
EventPublisher = Callable[[EventPayload], None]


def noop_event_publisher(_: EventPayload) -> None:
    """Default publisher for callers that don't need progress events."""
    pass


# --- Provisioning DTOs ---
class ProvisioningResultDTO(BaseModel):
    model_config = ConfigDict(extra="forbid")

    database_name: str
    created: bool
    schema_path: str
    schema_bytes: int


class DatabaseStatusDTO(BaseModel):
    model_config = ConfigDict(extra="forbid")

    database_name: str
    exists: bool
    server: str
