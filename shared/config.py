"""Configuration helpers for environment variables."""

from __future__ import annotations

import os
import logging

from dotenv import load_dotenv


logger = logging.getLogger(__name__)


_DEFAULT_HOST = "127.0.0.1"
_DEFAULT_PORT = 8089
_DEFAULT_LOG_LEVEL = "INFO"


def _should_load_dotenv() -> bool:
    """Return whether local dotenv loading should run."""
    app_env = os.getenv("APP_ENV", "dev").strip().lower()
    return app_env in {"dev", "local"}


if _should_load_dotenv():
    load_dotenv()


def get_env(name: str, default: str | None = None) -> str | None:
    """Return a raw environment value or default."""
    return os.getenv(name, default)


def app_env() -> str:
    """Return the current application environment."""
    return (get_env("APP_ENV", "dev") or "dev").strip() or "dev"


def service_host() -> str:
    """Return the interface the HTTP server binds to."""
    return (get_env("TRANSACTION_SERVICE_HOST", _DEFAULT_HOST) or _DEFAULT_HOST).strip() or _DEFAULT_HOST


def service_port() -> int:
    """Return the HTTP port, falling back to the default on invalid values."""
    raw_value = (get_env("TRANSACTION_SERVICE_PORT", "") or "").strip()
    if not raw_value:
        return _DEFAULT_PORT

    try:
        port = int(raw_value)
    except ValueError:
        logger.warning("service_port_invalid value=%s; using default=%s", raw_value, _DEFAULT_PORT)
        return _DEFAULT_PORT

    if not 0 < port < 65536:
        logger.warning("service_port_out_of_range value=%s; using default=%s", port, _DEFAULT_PORT)
        return _DEFAULT_PORT
    return port


def log_level() -> str:
    """Return the configured root log level name."""
    raw_value = (get_env("LOG_LEVEL", _DEFAULT_LOG_LEVEL) or _DEFAULT_LOG_LEVEL).strip().upper()
    if raw_value not in logging.getLevelNamesMapping():
        return _DEFAULT_LOG_LEVEL
    return raw_value


def cors_allow_origins() -> list[str]:
    """Return CORS allowed origins from env with safe environment defaults."""
    raw_origins = get_env("CORS_ALLOW_ORIGINS", "") or ""
    parsed_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

    if parsed_origins:
        return parsed_origins

    if app_env().strip().lower() in {"dev", "local"}:
        return ["http://localhost:5173", "http://127.0.0.1:5173"]

    logger.warning(
        "cors_allow_origins_empty_in_prod app_env=%s; define CORS_ALLOW_ORIGINS",
        app_env(),
    )

    return []
