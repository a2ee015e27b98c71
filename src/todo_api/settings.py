from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - BACKEND_MODE: 'live' (default, Postgres/Redis/Elasticsearch) or 'memory'
    - POSTGRES_HOST, POSTGRES_PORT, POSTGRES_DATABASE, POSTGRES_USER, POSTGRES_PASSWORD
    - REDIS_HOST, REDIS_PORT: cache address
    - REDIS_RECONNECT_INTERVAL: seconds between background reconnect attempts (default 1.0)
    - ELASTIC_HOST, ELASTIC_PORT: search index address
    - ELASTIC_PING_TIMEOUT: startup ping timeout in seconds (default 30)
    - ELASTIC_REFRESH: refresh policy when indexing ('wait_for' by default)
    - PORT: HTTP listen port (default 3000)
    - LOG_LEVEL: logging level (default 'info')
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    """

    backend_mode: str
    postgres_host: str
    postgres_port: int
    postgres_database: str
    postgres_user: str
    postgres_password: str
    redis_host: str
    redis_port: int
    redis_reconnect_interval: float
    elastic_host: str
    elastic_port: int
    elastic_ping_timeout: float
    elastic_refresh: str
    port: int
    log_level: str
    cors_allow_origins: List[str]

    @property
    def elastic_url(self) -> str:
        host = self.elastic_host if "://" in self.elastic_host else f"http://{self.elastic_host}"
        return f"{host}:{self.elastic_port}"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_float(value: str, default: float) -> float:
    try:
        return float(value.strip())
    except ValueError:
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    mode = _get_env("BACKEND_MODE", "live").strip().lower()
    if mode not in {"live", "memory"}:
        mode = "live"

    refresh = _get_env("ELASTIC_REFRESH", "wait_for").strip().lower()
    if refresh not in {"true", "false", "wait_for"}:
        refresh = "wait_for"

    return Settings(
        backend_mode=mode,
        postgres_host=_get_env("POSTGRES_HOST", "localhost").strip(),
        postgres_port=_parse_int(_get_env("POSTGRES_PORT", "5432"), 5432),
        postgres_database=_get_env("POSTGRES_DATABASE", "todos").strip(),
        postgres_user=_get_env("POSTGRES_USER", "postgres").strip(),
        postgres_password=_get_env("POSTGRES_PASSWORD", "postgres"),
        redis_host=_get_env("REDIS_HOST", "localhost").strip(),
        redis_port=_parse_int(_get_env("REDIS_PORT", "6379"), 6379),
        redis_reconnect_interval=_parse_float(_get_env("REDIS_RECONNECT_INTERVAL", "1.0"), 1.0),
        elastic_host=_get_env("ELASTIC_HOST", "localhost").strip(),
        elastic_port=_parse_int(_get_env("ELASTIC_PORT", "9200"), 9200),
        elastic_ping_timeout=_parse_float(_get_env("ELASTIC_PING_TIMEOUT", "30"), 30.0),
        elastic_refresh=refresh,
        port=_parse_int(_get_env("PORT", "3000"), 3000),
        log_level=_get_env("LOG_LEVEL", "info").strip().lower(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
    )
