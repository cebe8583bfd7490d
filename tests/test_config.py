# tests/test_config.py

import pytest

from app.core.config import ConfigError, Settings
from app.main import create_app


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


@pytest.mark.parametrize(
    "overrides",
    [
        pytest.param({"APP_ENV": "local", "CORS_ALLOW_ORIGIN": "*"}, id="local-allows-wildcard-cors"),
        pytest.param({"APP_ENV": "local"}, id="local-defaults"),
        pytest.param(
            {
                "APP_ENV": "production",
                "PG_DSN": "postgres://ops:secret@db:5432/ops",
                "CORS_ALLOW_ORIGIN": "https://admin.example.com",
                "REDIS_URL": "redis://cache:6379/0",
            },
            id="non-local-with-explicit-cors-and-redis",
        ),
    ],
)
def test_valid_configurations(overrides):
    make_settings(**overrides).ensure_valid()


@pytest.mark.parametrize(
    "overrides, message",
    [
        pytest.param(
            {"APP_ENV": "production", "CORS_ALLOW_ORIGIN": "https://admin.example.com"},
            "PG_DSN is required",
            id="non-local-requires-pg-dsn",
        ),
        pytest.param(
            {"APP_ENV": "production", "PG_DSN": "postgres://db/ops", "CORS_ALLOW_ORIGIN": ""},
            "CORS_ALLOW_ORIGIN is required",
            id="non-local-requires-cors",
        ),
        pytest.param(
            {"APP_ENV": "production", "PG_DSN": "postgres://db/ops", "CORS_ALLOW_ORIGIN": "*"},
            "cannot be *",
            id="non-local-rejects-wildcard-cors",
        ),
        pytest.param({"APP_ENV": "local", "CACHE_MODE": "memcached"}, "CACHE_MODE", id="unknown-cache-mode"),
        pytest.param(
            {"APP_ENV": "local", "CACHE_MODE": "redis", "REDIS_URL": ""},
            "REDIS_URL is required",
            id="redis-mode-requires-url",
        ),
    ],
)
def test_invalid_configurations(overrides, message):
    with pytest.raises(ConfigError, match=message.replace("*", r"\*")):
        make_settings(**overrides).ensure_valid()


def test_environment_defaults():
    local = make_settings(APP_ENV="local")
    assert local.CACHE_MODE == "local"
    assert local.CORS_ALLOW_ORIGIN == "*"
    assert local.database_driver == "sqlite"
    assert local.DATABASE_URL == f"sqlite:///{local.SQLITE_PATH}"

    production = make_settings(APP_ENV="production", PG_DSN="postgres://ops:secret@db:5432/ops")
    assert production.CACHE_MODE == "redis"
    assert production.CORS_ALLOW_ORIGIN == ""
    assert production.database_driver == "pgsql"
    assert production.DATABASE_URL == "postgresql+psycopg2://ops:secret@db:5432/ops"


def test_create_app_refuses_invalid_configuration():
    with pytest.raises(ConfigError):
        create_app(make_settings(APP_ENV="production"))
