from __future__ import annotations

import ipaddress
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 63343
DEFAULT_TIMEOUT = 5.0
DEFAULT_RECENT_FILES_LIMIT = 15


class BridgeSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)
    url: str | None = None
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    recent_files_limit: int = Field(default=DEFAULT_RECENT_FILES_LIMIT, ge=0)
    log_level: str = "INFO"

    @field_validator("host")
    @classmethod
    def require_loopback(cls, host: str) -> str:
        """The bridge has no authentication, so it only ever listens on loopback."""
        if host == "localhost":
            return host
        try:
            address = ipaddress.ip_address(host)
        except ValueError:
            raise ValueError(f"host must be a loopback address, got {host!r}") from None
        if not address.is_loopback:
            raise ValueError(f"host must be a loopback address, got {host!r}")
        return host

    @property
    def base_url(self) -> str:
        """URL the client layer queries; defaults to the bridge's loopback address."""
        if self.url:
            return self.url.rstrip("/")
        return f"http://localhost:{self.port}"


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def load_settings(**overrides: object) -> BridgeSettings:
    """Read ``IDE_BRIDGE_*`` environment variables; non-None *overrides* win."""
    values: dict[str, object] = {
        "host": os.getenv("IDE_BRIDGE_HOST"),
        "port": _env_int("IDE_BRIDGE_PORT"),
        "url": os.getenv("IDE_BRIDGE_URL"),
        "timeout": _env_float("IDE_BRIDGE_TIMEOUT"),
        "recent_files_limit": _env_int("IDE_BRIDGE_RECENT_FILES_LIMIT"),
        "log_level": os.getenv("IDE_BRIDGE_LOG_LEVEL"),
    }
    values.update(overrides)
    return BridgeSettings(**{key: value for key, value in values.items() if value is not None})
