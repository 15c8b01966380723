"""Django settings for huntStats.

The overlay host runs this project locally. Configuration is driven by
environment variables so per-user paths are not checked into the repository.
"""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, *, default: bool) -> bool:
    """Parse a boolean environment variable.

    Args:
        name: Environment variable name.
        default: Value when the variable is not set.

    Returns:
        Parsed boolean value.
    """

    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _env_path(name: str, *, default: Path | None) -> Path | None:
    """Parse a filesystem path environment variable.

    Args:
        name: Environment variable name.
        default: Value when the variable is not set or blank.

    Returns:
        The expanded path, or `default`.
    """

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return Path(raw.strip()).expanduser()


DEBUG = _env_bool("HUNTSTATS_DEBUG", default=True)

_DEV_SECRET_KEY = "dev-only-insecure-secret-key"
SECRET_KEY = os.getenv("HUNTSTATS_SECRET_KEY") or (_DEV_SECRET_KEY if DEBUG else "")
if not SECRET_KEY:
    raise RuntimeError("HUNTSTATS_SECRET_KEY is required when HUNTSTATS_DEBUG is False.")

ALLOWED_HOSTS: list[str] = ["localhost", "127.0.0.1", "[::1]", "testserver"]

INSTALLED_APPS = [
    "overlay.apps.OverlayConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "huntStats.urls"

WSGI_APPLICATION = "huntStats.wsgi.application"

# The overlay keeps no relational state; settings live in a JSON file.
DATABASES: dict[str, dict[str, str]] = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

OVERLAY_SETTINGS_FILE = _env_path(
    "HUNTSTATS_SETTINGS_FILE",
    default=Path.home() / ".huntstats" / "settings.json",
)
OVERLAY_ENGINE_CONFIG = _env_path("OVERLAY_ENGINE_CONFIG", default=None)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "[{levelname}] {name}: {message}", "style": "{"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "overlay": {
            "handlers": ["console"],
            "level": os.getenv("HUNTSTATS_LOG_LEVEL", "INFO").upper(),
        },
        "session_analysis": {
            "handlers": ["console"],
            "level": os.getenv("HUNTSTATS_LOG_LEVEL", "INFO").upper(),
        },
    },
}
