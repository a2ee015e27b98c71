import pytest

from todo_api.settings import get_settings

ENV_VARS = [
    "BACKEND_MODE",
    "POSTGRES_HOST",
    "POSTGRES_PORT",
    "POSTGRES_DATABASE",
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "REDIS_HOST",
    "REDIS_PORT",
    "REDIS_RECONNECT_INTERVAL",
    "ELASTIC_HOST",
    "ELASTIC_PORT",
    "ELASTIC_PING_TIMEOUT",
    "ELASTIC_REFRESH",
    "PORT",
    "LOG_LEVEL",
    "CORS_ALLOW_ORIGINS",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        s = get_settings()
        assert s.backend_mode == "live"
        assert (s.postgres_host, s.postgres_port, s.postgres_database) == ("localhost", 5432, "todos")
        assert (s.redis_host, s.redis_port) == ("localhost", 6379)
        assert s.redis_reconnect_interval == 1.0
        assert s.elastic_url == "http://localhost:9200"
        assert s.elastic_ping_timeout == 30.0
        assert s.elastic_refresh == "wait_for"
        assert s.port == 3000
        assert s.log_level == "info"
        assert s.cors_allow_origins == ["*"]

    def test_overrides(self, clean_env):
        clean_env.setenv("BACKEND_MODE", "MEMORY")
        clean_env.setenv("POSTGRES_HOST", "db")
        clean_env.setenv("POSTGRES_PORT", "6543")
        clean_env.setenv("REDIS_HOST", "cache")
        clean_env.setenv("ELASTIC_HOST", "https://search")
        clean_env.setenv("ELASTIC_PORT", "9243")
        clean_env.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")

        s = get_settings()
        assert s.backend_mode == "memory"
        assert (s.postgres_host, s.postgres_port) == ("db", 6543)
        assert s.redis_host == "cache"
        assert s.elastic_url == "https://search:9243"
        assert s.cors_allow_origins == ["http://a.test", "http://b.test"]

    def test_invalid_values_fall_back(self, clean_env):
        clean_env.setenv("BACKEND_MODE", "cassandra")
        clean_env.setenv("REDIS_PORT", "not-a-port")
        clean_env.setenv("REDIS_RECONNECT_INTERVAL", "soon")
        clean_env.setenv("ELASTIC_REFRESH", "sometimes")
        clean_env.setenv("PORT", "")

        s = get_settings()
        assert s.backend_mode == "live"
        assert s.redis_port == 6379
        assert s.redis_reconnect_interval == 1.0
        assert s.elastic_refresh == "wait_for"
        assert s.port == 3000
