# app/core/config.py

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigError(ValueError):
    """Конфигурация не позволяет запустить сервис."""


class Settings(BaseSettings):
    # Окружение: "local" -> SQLite + локальный кеш, иначе PostgreSQL + Redis
    APP_ENV: str = "local"
    PORT: int = 8080

    # Настройки базы данных
    SQLITE_PATH: str = "./data/app.db"
    PG_DSN: str = ""

    # Настройки кеша
    REDIS_URL: str = "redis://127.0.0.1:6379/0"
    CACHE_MODE: str = ""  # пусто -> выбирается по APP_ENV

    # Пустое значение вне local-окружения не пройдет ensure_valid()
    CORS_ALLOW_ORIGIN: str | None = None

    # Время жизни mock-сессий админки
    AUTH_SESSION_TTL_SECONDS: int = 60 * 60 * 24  # 24 часа

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @model_validator(mode="after")
    def apply_env_defaults(self):
        if not self.CACHE_MODE:
            self.CACHE_MODE = "local" if self.is_local else "redis"
        if self.CORS_ALLOW_ORIGIN is None:
            self.CORS_ALLOW_ORIGIN = "*" if self.is_local else ""
        return self

    @property
    def is_local(self) -> bool:
        return self.APP_ENV == "local"

    @property
    def database_driver(self) -> str:
        return "sqlite" if self.is_local else "pgsql"

    @property
    def DATABASE_URL(self) -> str:
        if self.is_local:
            return f"sqlite:///{self.SQLITE_PATH}"
        # postgres://... -> postgresql+psycopg2://...
        dsn = self.PG_DSN
        for prefix in ("postgresql://", "postgres://"):
            if dsn.startswith(prefix):
                return "postgresql+psycopg2://" + dsn[len(prefix):]
        return dsn

    def ensure_valid(self) -> None:
        """Проверяет сочетание настроек, при котором сервис может стартовать."""
        if not self.is_local and not self.PG_DSN:
            raise ConfigError("PG_DSN is required when APP_ENV is not local")
        if not self.is_local and not self.CORS_ALLOW_ORIGIN:
            raise ConfigError("CORS_ALLOW_ORIGIN is required when APP_ENV is not local")
        if not self.is_local and self.CORS_ALLOW_ORIGIN == "*":
            raise ConfigError("CORS_ALLOW_ORIGIN cannot be * when APP_ENV is not local")
        if self.CACHE_MODE not in ("local", "redis"):
            raise ConfigError("CACHE_MODE must be local or redis")
        if self.CACHE_MODE == "redis" and not self.REDIS_URL:
            raise ConfigError("REDIS_URL is required when CACHE_MODE=redis")


settings = Settings()
