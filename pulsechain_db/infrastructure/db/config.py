from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from dotenv import find_dotenv, load_dotenv

DEFAULT_DB_NAME = "pulsechain_explorer"
DEFAULT_ADMIN_DB_NAME = "postgres"
DEFAULT_DB_HOST = "localhost"
DEFAULT_DB_PORT = 5432
DEFAULT_DB_USER = "postgres"
DEFAULT_CONNECT_TIMEOUT = 10.0

_REPO_ROOT = Path(__file__).resolve().parents[3]
_CONFIG_FILE = _REPO_ROOT / "config.json"

# config.json key -> environment variable
_ENV_KEYS = {
    "host": "DB_HOST",
    "port": "DB_PORT",
    "user": "DB_USER",
    "password": "DB_PASSWORD",
    "name": "DB_NAME",
    "admin_name": "DB_ADMIN_NAME",
    "connect_timeout": "DB_CONNECT_TIMEOUT",
}


class ConfigurationError(ValueError):
    """Raised when database settings cannot be resolved."""


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection parameters for one provisioning run.

    Built once at process start and passed explicitly to the provisioner.
    """

    host: str = DEFAULT_DB_HOST
    port: int = DEFAULT_DB_PORT
    user: str = DEFAULT_DB_USER
    password: str = ""
    database: str = DEFAULT_DB_NAME
    admin_database: str = DEFAULT_ADMIN_DB_NAME
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT

    def connect_kwargs(self, database: str | None = None) -> Dict[str, Any]:
        """Return keyword arguments for ``psycopg.connect``."""

        kwargs: Dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "dbname": database or self.database,
            "connect_timeout": max(1, int(self.connect_timeout)),
        }
        if self.password:
            kwargs["password"] = self.password
        return kwargs

    def with_overrides(self, **overrides: Any) -> "DatabaseSettings":
        """Return a copy with every non-``None`` override applied."""

        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values) if values else self

    def describe(self, database: str | None = None) -> str:
        """Return ``user@host:port/db`` without the password."""

        return f"{self.user}@{self.host}:{self.port}/{database or self.database}"


def load_config(config_path: Path | str | None = None) -> Dict[str, Any]:
    """Load ``config.json`` if present and return it as a dictionary."""

    path = Path(config_path) if config_path is not None else _CONFIG_FILE
    if not path.exists():
        if config_path is not None:
            raise ConfigurationError(f"Config file not found: {path}")
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc


def load_env_file(env_file: Path | str | None = None) -> bool:
    """Populate ``os.environ`` from a ``.env`` file.

    Without an explicit path the nearest ``.env`` above the working directory
    is used, if any. Variables already set in the environment win.
    """

    if env_file is not None:
        path = Path(env_file)
        if not path.is_file():
            raise ConfigurationError(f"Env file not found: {path}")
        return load_dotenv(path, override=False)
    found = find_dotenv(usecwd=True)
    if not found:
        return False
    return load_dotenv(found, override=False)


def resolve_database_name(environ: Mapping[str, str] | None = None) -> str:
    """Return ``DB_NAME`` from the environment, or the default name.

    An empty value counts as unset.
    """

    env = os.environ if environ is None else environ
    return env.get("DB_NAME") or DEFAULT_DB_NAME


def _to_int(key: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from None


def _to_float(key: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from None


def load_settings(
    config_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> DatabaseSettings:
    """Build :class:`DatabaseSettings` from defaults, ``config.json`` and the environment.

    Environment variables override the ``db`` section of ``config.json``,
    which overrides the built-in defaults. Empty values are ignored.
    """

    env = os.environ if environ is None else environ
    cfg = load_config(config_path)
    if not isinstance(cfg, dict):
        raise ConfigurationError("config.json must contain a JSON object")
    db_cfg = cfg.get("db", {}) if isinstance(cfg.get("db", {}), dict) else {}

    raw: Dict[str, Any] = {}
    for key, env_key in _ENV_KEYS.items():
        value = env.get(env_key)
        if value in (None, ""):
            value = db_cfg.get(key)
        if value not in (None, ""):
            raw[key] = value

    settings = DatabaseSettings(
        host=str(raw.get("host", DEFAULT_DB_HOST)),
        port=_to_int("DB_PORT", raw.get("port", DEFAULT_DB_PORT)),
        user=str(raw.get("user", DEFAULT_DB_USER)),
        password=str(raw.get("password", "")),
        database=str(raw.get("name", DEFAULT_DB_NAME)),
        admin_database=str(raw.get("admin_name", DEFAULT_ADMIN_DB_NAME)),
        connect_timeout=_to_float(
            "DB_CONNECT_TIMEOUT", raw.get("connect_timeout", DEFAULT_CONNECT_TIMEOUT)
        ),
    )
    if not 0 < settings.port < 65536:
        raise ConfigurationError(f"DB_PORT out of range: {settings.port}")
    return settings
