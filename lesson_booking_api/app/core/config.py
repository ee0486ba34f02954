"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields.  Database
connection details live in a separate ``key=value`` properties file (see
``load_store_config``) so that credentials can be shipped alongside a
deployment without being baked into the environment.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import quote_plus

from dotenv import dotenv_values

from .exceptions import ConfigurationError


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Lesson Booking API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # Path to the ``db.properties`` file holding connection details.  A
    # relative path is resolved against the project root.
    db_properties: str = os.getenv("DB_PROPERTIES", "conf/db.properties")

    # A full connection string.  When set, the properties file is not read
    # for the URI (``db.dbName`` is still used unless ``DB_NAME`` is set).
    mongodb_uri: str = os.getenv("MONGODB_URI", "")
    db_name: str = os.getenv("DB_NAME", "")

    # Collection names match the data seeded for the front-end app.
    lessons_collection: str = os.getenv("LESSONS_COLLECTION", "products")
    orders_collection: str = os.getenv("ORDERS_COLLECTION", "order")

    # Upper bound for server selection; the only timeout applied to
    # store operations.
    store_timeout_ms: int = int(os.getenv("STORE_TIMEOUT_MS", "5000"))

    # Reconciliation behaviour.  With optimistic locking enabled the
    # lesson capacity write is conditional on the version that was read,
    # and conflicting reconciliations are retried up to
    # ``reconcile_max_attempts`` times.
    optimistic_locking: bool = _env_flag("OPTIMISTIC_LOCKING", "true")
    reconcile_max_attempts: int = int(os.getenv("RECONCILE_MAX_ATTEMPTS", "3"))
    clamp_available_spaces: bool = _env_flag("CLAMP_AVAILABLE_SPACES", "false")

    # Optional directories for the front-end bundle and lesson images.
    static_dir: str = os.getenv("STATIC_DIR", "")
    images_dir: str = os.getenv("IMAGES_DIR", "")


@dataclass(frozen=True)
class StoreConfig:
    """Immutable connection details for the document store."""

    uri: str
    db_name: str


def resolve_path(path: str) -> Path:
    """Resolve ``path`` relative to the project root unless absolute."""
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return (base_dir / candidate).resolve()


def load_properties(path: Path) -> Dict[str, str]:
    """Read the ``key=value`` database properties file.

    Parsed with ``python-dotenv``: ``#`` comments, blank lines, quoted
    values and whitespace around ``=`` are handled there.  ``${...}``
    interpolation is disabled so passwords are taken verbatim, and keys
    without a value map to an empty string.
    """
    values = dotenv_values(path, interpolate=False, encoding="utf-8")
    return {key: value or "" for key, value in values.items()}


def build_connection_uri(properties: Dict[str, str]) -> str:
    """Assemble a MongoDB URI from ``db.*`` properties.

    Username and password are percent-encoded; the remaining parts are
    concatenated verbatim, e.g. ``mongodb+srv://`` + ``user:pwd`` +
    ``@cluster0.example.net/`` + ``?retryWrites=true``.
    """
    try:
        prefix = properties["db.prefix"]
        user = quote_plus(properties["db.user"])
        pwd = quote_plus(properties["db.pwd"])
        db_url = properties["db.dbUrl"]
    except KeyError as e:
        raise ConfigurationError(f"Missing database property {e.args[0]}") from e
    params = properties.get("db.params", "")
    return f"{prefix}{user}:{pwd}{db_url}{params}"


def load_store_config(settings: "Settings", properties_path: Optional[str] = None) -> StoreConfig:
    """Build the store configuration once at startup.

    ``MONGODB_URI``/``DB_NAME`` take precedence over the properties
    file.  A missing file or missing keys raise ``ConfigurationError``.
    """
    properties: Dict[str, str] = {}
    uri = settings.mongodb_uri
    db_name = settings.db_name
    if not uri or not db_name:
        path = resolve_path(properties_path or settings.db_properties)
        if not path.is_file():
            raise ConfigurationError(f"Database properties file not found: {path}")
        properties = load_properties(path)
    if not uri:
        uri = build_connection_uri(properties)
    if not db_name:
        db_name = properties.get("db.dbName", "")
    if not db_name:
        raise ConfigurationError("Missing database property db.dbName")
    return StoreConfig(uri=uri, db_name=db_name)


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
