"""
Runtime configuration.

Everything is read from environment variables. Empty values count as unset.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional


DEFAULT_PORT = 8080
DEFAULT_HTTP_TIMEOUT = 3.0  # seconds, per external call
DEFAULT_METADATA_TIMEOUT = 1.0  # metadata server is local or absent
DEFAULT_METADATA_URL = "http://metadata.google.internal/computeMetadata/v1"


class RuntimeEnvironment(str, Enum):
    """Where the process is running."""
    GOOGLE_CLOUD = "google_cloud"
    LOCAL = "local"


@dataclass(frozen=True)
class Settings:
    port: int = DEFAULT_PORT
    search_cx: Optional[str] = None
    search_key: Optional[str] = None
    environment: Optional[RuntimeEnvironment] = None  # None -> autodetect
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    metadata_timeout: float = DEFAULT_METADATA_TIMEOUT
    metadata_url: str = DEFAULT_METADATA_URL
    log_level: str = "INFO"
    log_dir: str = "logs"


def _get(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _get_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = _get(environ, name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got '{raw}'")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Settings instance

    Raises:
        ValueError: If PORT, a timeout or WHEREAMI_ENVIRONMENT is malformed
    """
    if environ is None:
        environ = os.environ

    raw_port = _get(environ, "PORT")
    try:
        port = int(raw_port) if raw_port is not None else DEFAULT_PORT
    except ValueError:
        raise ValueError(f"PORT must be an integer, got '{raw_port}'")

    raw_env = _get(environ, "WHEREAMI_ENVIRONMENT")
    environment = None
    if raw_env is not None:
        try:
            environment = RuntimeEnvironment(raw_env.lower())
        except ValueError:
            valid = ", ".join(e.value for e in RuntimeEnvironment)
            raise ValueError(f"WHEREAMI_ENVIRONMENT must be one of: {valid}. Got '{raw_env}'")

    return Settings(
        port=port,
        search_cx=_get(environ, "SEARCH_CX"),
        search_key=_get(environ, "SEARCH_KEY"),
        environment=environment,
        http_timeout=_get_float(environ, "WHEREAMI_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        metadata_timeout=_get_float(environ, "WHEREAMI_METADATA_TIMEOUT", DEFAULT_METADATA_TIMEOUT),
        metadata_url=(_get(environ, "WHEREAMI_METADATA_URL") or DEFAULT_METADATA_URL).rstrip("/"),
        log_level=(_get(environ, "WHEREAMI_LOG_LEVEL") or "INFO").upper(),
        log_dir=_get(environ, "WHEREAMI_LOG_DIR") or "logs",
    )
