"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
demo server starts with no configuration at all.  In a deployment you
should at least override ``SESSION_SECRET``.

Components never read these values from module globals; ``create_app``
receives a ``Settings`` instance and hands the relevant values to each
component when it is constructed.  Tests build their own instance.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Survey Portal API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_bool("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file in addition to the console handler.
    log_file: str = os.getenv("LOG_FILE", "")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # Directory holding users.json, responses.json and logins.json.  A
    # relative path is resolved against the project root (see
    # ``resolve_data_dir``).
    data_dir: str = os.getenv("DATA_DIR", "data")

    session_secret: str = os.getenv("SESSION_SECRET", "dev-secret-change-me")
    session_ttl_seconds: int = int(os.getenv("SESSION_TTL_SECONDS", str(24 * 60 * 60)))
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "sid")
    session_cookie_secure: bool = _env_bool("SESSION_COOKIE_SECURE")

    # Attempts allowed per window on /register and /login, per client.
    auth_rate_limit: int = int(os.getenv("AUTH_RATE_LIMIT", "8"))
    auth_rate_window_seconds: int = int(os.getenv("AUTH_RATE_WINDOW_SECONDS", "60"))

    password_hash_iterations: int = int(os.getenv("PASSWORD_HASH_ITERATIONS", "100000"))

    avatar_id_lookup_url: str = os.getenv(
        "AVATAR_ID_LOOKUP_URL", "https://api.roblox.com/users/get-by-username"
    )
    avatar_thumbnail_url: str = os.getenv(
        "AVATAR_THUMBNAIL_URL", "https://thumbnails.roblox.com/v1/users/avatar-headshot"
    )
    avatar_thumbnail_size: str = os.getenv("AVATAR_THUMBNAIL_SIZE", "150x150")
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "10"))

    # Comma‑separated list of allowed CORS origins, ``*`` for any.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    def resolve_data_dir(self) -> Path:
        """Return the absolute data directory.

        Absolute paths are used as is; relative ones are resolved
        relative to the project root (the directory containing the
        ``survey_portal_api`` package).
        """
        path = Path(self.data_dir)
        if path.is_absolute():
            return path
        base_dir = Path(__file__).resolve().parent.parent.parent.parent
        return (base_dir / path).resolve()

    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Instantiate settings once so ``main`` and ``run.py`` can import it.
# Because the dataclass computes values at import time, environment
# variables should be set before importing this module.
settings = Settings()
