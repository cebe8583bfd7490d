# tests/conftest.py
import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.main import create_app


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """
    Локальное окружение: SQLite-файл во временной папке и кеш в памяти.
    .env не читаем, чтобы тесты не зависели от машины разработчика.
    """
    return Settings(
        _env_file=None,
        APP_ENV="local",
        SQLITE_PATH=str(tmp_path / "data" / "app.db"),
        CACHE_MODE="local",
        CORS_ALLOW_ORIGIN="*",
        LOG_LEVEL="INFO",
    )


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def app_state(app):
    return app.state.ctx


@pytest.fixture
async def client(app):
    """HTTP-клиент поверх ASGI с запущенным lifespan (создание таблиц и т.д.)."""
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


@pytest.fixture
def db_session(app_state, client):
    """Прямой доступ к БД в обход API (таблицы уже созданы фикстурой client)."""
    db = app_state.session_factory()
    try:
        yield db
    finally:
        db.close()
