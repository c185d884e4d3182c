from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

from idcheck.errors import ConfigurationError

DEFAULT_ENDPOINT = "https://api.onfido.com/v3"
DEFAULT_TIMEOUT_SEC = 30.0
DEFAULT_MAX_UPLOAD_BYTES = 25 * 1024 * 1024

TOKEN_ENV = "IDCHECK_API_TOKEN"


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Configuration for the API client.

    Security notes:
    - ``token`` is a secret. It is excluded from ``repr`` and never logged.

    """

    token: str
    endpoint: str = DEFAULT_ENDPOINT
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES

    def __post_init__(self) -> None:
        if not self.token:
            raise ConfigurationError(f"missing API token (set {TOKEN_ENV})")
        if not self.endpoint:
            raise ConfigurationError("endpoint must not be empty")
        if self.timeout_sec <= 0:
            raise ConfigurationError(f"timeout must be positive: {self.timeout_sec}")
        if self.max_upload_bytes <= 0:
            raise ConfigurationError(f"upload cap must be positive: {self.max_upload_bytes}")

    def __repr__(self) -> str:
        return (
            f"ClientConfig(endpoint={self.endpoint!r}, timeout_sec={self.timeout_sec!r}, "
            f"max_upload_bytes={self.max_upload_bytes!r})"
        )

    @staticmethod
    def from_env(
        *,
        token: Optional[str] = None,
        endpoint: Optional[str] = None,
        timeout_sec: Optional[float] = None,
    ) -> "ClientConfig":
        """Build a config from environment variables.

        Explicit arguments win over the environment.

        - IDCHECK_API_TOKEN (required)
        - IDCHECK_ENDPOINT (default https://api.onfido.com/v3)
        - IDCHECK_TIMEOUT_SEC (default 30)
        - IDCHECK_MAX_UPLOAD_BYTES (default 25 MiB)

        """

        cfg = ClientConfig(
            token=token or os.environ.get(TOKEN_ENV, "").strip(),
            endpoint=os.environ.get("IDCHECK_ENDPOINT", "").strip() or DEFAULT_ENDPOINT,
            timeout_sec=_env_float("IDCHECK_TIMEOUT_SEC", DEFAULT_TIMEOUT_SEC),
            max_upload_bytes=_env_int("IDCHECK_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        )
        if endpoint:
            cfg = replace(cfg, endpoint=endpoint)
        if timeout_sec is not None:
            cfg = replace(cfg, timeout_sec=float(timeout_sec))
        return cfg


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to ``default``."""

    raw = os.environ.get(name, "").strip()
    if not raw:
        return int(default)
    try:
        return int(raw)
    except ValueError:
        return int(default)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return float(default)
    try:
        return float(raw)
    except ValueError:
        return float(default)


def log_level_from_env(default: str = "WARNING") -> str:
    """Log level name from IDCHECK_LOG_LEVEL."""

    return (os.environ.get("IDCHECK_LOG_LEVEL", "").strip() or default).upper()
