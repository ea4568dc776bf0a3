from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from knowtrack.errors import ConfigError


@dataclass(frozen=True)
class Settings:
    STORE_URL: str
    STORE_KEY: str
    SESSION_COOKIE_NAME: str = "kt_session"
    TIMEOUT: float = 10.0
    LOG_LEVEL: str = "INFO"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from the environment.

    The store URL and anonymous key are required; the app cannot start without them.
    """
    env = os.environ if environ is None else environ
    url = env.get("KNOWTRACK_STORE_URL", "").strip()
    key = env.get("KNOWTRACK_STORE_KEY", "").strip()
    missing = [name for name, value in (("KNOWTRACK_STORE_URL", url), ("KNOWTRACK_STORE_KEY", key)) if not value]
    if missing:
        raise ConfigError(f"Missing required environment variable(s): {', '.join(missing)}")
    try:
        timeout = float(env.get("KNOWTRACK_TIMEOUT", "10"))
    except ValueError as e:
        raise ConfigError("KNOWTRACK_TIMEOUT must be a number of seconds.") from e
    return Settings(
        STORE_URL=url.rstrip("/"),
        STORE_KEY=key,
        SESSION_COOKIE_NAME=env.get("KNOWTRACK_SESSION_COOKIE", "kt_session"),
        TIMEOUT=timeout,
        LOG_LEVEL=env.get("KNOWTRACK_LOG_LEVEL", "INFO").upper(),
    )
