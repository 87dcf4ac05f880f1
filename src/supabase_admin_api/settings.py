from __future__ import annotations

from dataclasses import dataclass, field
from os import getenv

from dotenv import find_dotenv, load_dotenv

from .errors import MissingSettingError


def load_env(path: str | None = None, *, override: bool = False) -> bool:
    """
    Load environment variables from a .env file.

    Args:
        path: Optional path to a .env file. If not provided, uses find_dotenv().
        override: Whether to override existing environment variables.

    Returns:
        True if a .env file was found and loaded, False otherwise.
    """
    env_path = path or find_dotenv(usecwd=True)
    if not env_path:
        return False
    return load_dotenv(env_path, override=override)


def _env_str(name: str, default: str | None = None) -> str | None:
    raw = getenv(name)
    if raw is None:
        return default
    value = raw.strip()
    return value or default


def _env_bool(name: str) -> bool | None:
    raw = getenv(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return None


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name)
    return default if raw is None else int(raw)


def _env_float(name: str, default: float) -> float:
    raw = _env_str(name)
    return default if raw is None else float(raw)


def _auth_bypass_default() -> bool:
    value = _env_bool("ADMIN_AUTH_BYPASS")
    if value is None:
        return False
    return value


@dataclass(frozen=True)
class Settings:
    # Supabase (service-role credentials bypass row-level security)
    supabase_url: str | None = field(default_factory=lambda: _env_str("SUPABASE_URL"))
    supabase_service_role_key: str | None = field(default_factory=lambda: _env_str("SUPABASE_SERVICE_ROLE_KEY"))
    supabase_http_timeout: float = field(default_factory=lambda: _env_float("SUPABASE_HTTP_TIMEOUT", 30.0))
    supabase_probe_rpc: str = field(default_factory=lambda: _env_str("SUPABASE_PROBE_RPC", "version") or "version")

    # Direct Postgres connection (transaction pooler)
    database_url: str | None = field(default_factory=lambda: _env_str("DATABASE_URL"))
    db_pool_max: int = field(default_factory=lambda: _env_int("DB_POOL_MAX", 10))
    db_pool_min: int = field(default_factory=lambda: _env_int("DB_POOL_MIN", 0))
    db_pool_idle_timeout: float = field(default_factory=lambda: _env_float("DB_POOL_IDLE_TIMEOUT", 20.0))
    db_connect_timeout: float = field(default_factory=lambda: _env_float("DB_CONNECT_TIMEOUT", 10.0))

    # HTTP listener
    host: str = field(default_factory=lambda: _env_str("HOST", "0.0.0.0") or "0.0.0.0")
    port: int = field(default_factory=lambda: _env_int("PORT", 3000))

    # Admin route authentication
    admin_api_key: str | None = field(default_factory=lambda: _env_str("ADMIN_API_KEY"))
    admin_auth_bypass: bool = field(default_factory=_auth_bypass_default)

    # Logging / error reporting
    log_level: str = field(default_factory=lambda: (_env_str("LOG_LEVEL", "INFO") or "INFO").upper())
    log_format: str = field(default_factory=lambda: (_env_str("LOG_FORMAT", "text") or "text").lower())
    sentry_dsn: str | None = field(default_factory=lambda: _env_str("SENTRY_DSN"))
    environment: str = field(default_factory=lambda: _env_str("ENVIRONMENT", "development") or "development")

    def require(self, name: str) -> str:
        """Return a required setting, raising if it was never supplied."""
        value = getattr(self, name)
        if not value:
            raise MissingSettingError(name.upper())
        return value


def get_settings() -> Settings:
    return Settings()
