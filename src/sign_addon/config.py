"""Configuration settings for the signing client."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

DEFAULT_API_URL_PREFIX = "https://addons.mozilla.org/api/v5"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw else default


@dataclass
class Settings:
    """Client settings. Durations are in seconds."""

    api_key: str = ""
    api_secret: str = ""
    api_url_prefix: str = DEFAULT_API_URL_PREFIX
    api_jwt_expires_in: int = 60 * 5
    status_check_interval: float = 1.0
    status_check_timeout: float = 15 * 60.0
    download_dir: str = "."
    proxy_server: str | None = None
    request_config: dict[str, Any] = field(default_factory=dict)
    debug_logging: bool = False

    @property
    def request_timeout(self) -> float:
        # The request must not outlive the JWT it carries.
        return self.api_jwt_expires_in + 0.5

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """Build settings from SIGN_ADDON_* environment variables."""
        values: dict[str, Any] = {
            "api_key": os.getenv("SIGN_ADDON_API_KEY", ""),
            "api_secret": os.getenv("SIGN_ADDON_API_SECRET", ""),
            "api_url_prefix": os.getenv("SIGN_ADDON_API_URL_PREFIX", DEFAULT_API_URL_PREFIX),
            "api_jwt_expires_in": int(os.getenv("SIGN_ADDON_JWT_EXPIRES_IN", "300")),
            "status_check_interval": _env_float("SIGN_ADDON_STATUS_CHECK_INTERVAL", 1.0),
            "status_check_timeout": _env_float("SIGN_ADDON_TIMEOUT", 15 * 60.0),
            "download_dir": os.getenv("SIGN_ADDON_DOWNLOAD_DIR", "."),
            "proxy_server": os.getenv("SIGN_ADDON_PROXY") or None,
            "debug_logging": os.getenv("SIGN_ADDON_DEBUG", "").lower() == "true",
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
