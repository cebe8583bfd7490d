# app/db/session.py

import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# Таймауты на запросы (в секундах)
CRUD_TIMEOUT_SECONDS = 3
REPORT_TIMEOUT_SECONDS = 5

# Как часто (в инструкциях VM) SQLite дергает progress handler
_SQLITE_PROGRESS_STEPS = 1000


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # Без этого ON DELETE CASCADE в SQLite не работает
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> Engine:
    """Создает движок под текущее окружение: SQLite локально, PostgreSQL иначе."""
    if settings.is_local:
        engine = create_engine(
            settings.DATABASE_URL,
            connect_args={"check_same_thread": False},
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)
    logger.info(f"Database engine created (driver={settings.database_driver}).")
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Создает недостающие таблицы. Полноценные миграции живут в alembic/."""
    if engine.dialect.name == "sqlite" and engine.url.database:
        directory = os.path.dirname(engine.url.database)
        if directory:
            os.makedirs(directory, exist_ok=True)

    # Импорт нужен, чтобы модели зарегистрировались в Base.metadata
    from app.models import campaign, member, order  # noqa: F401

    Base.metadata.create_all(bind=engine)


def ping_db(engine: Engine) -> None:
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))


@contextmanager
def statement_timeout(db: Session, seconds: float) -> Iterator[None]:
    """
    Ограничивает время выполнения запросов внутри блока.
    PostgreSQL: SET LOCAL statement_timeout (действует до конца транзакции).
    SQLite: progress handler прерывает текущий запрос после дедлайна,
    драйвер бросает OperationalError("interrupted").
    """
    connection = db.connection()
    if connection.dialect.name == "postgresql":
        connection.execute(text(f"SET LOCAL statement_timeout = {int(seconds * 1000)}"))
        yield
        return

    if connection.dialect.name != "sqlite":
        yield
        return

    raw_connection = connection.connection.dbapi_connection
    deadline = time.monotonic() + seconds

    def _abort_after_deadline() -> int:
        # Ненулевой ответ заставляет SQLite прервать запрос
        return 1 if time.monotonic() > deadline else 0

    raw_connection.set_progress_handler(_abort_after_deadline, _SQLITE_PROGRESS_STEPS)
    try:
        yield
    finally:
        raw_connection.set_progress_handler(None, 0)


async def run_in_session(db: Session, func, *args, timeout: float = CRUD_TIMEOUT_SECONDS, **kwargs):
    """
    Выполняет синхронную функцию работы с БД в пуле потоков
    под ограничением времени и фиксирует транзакцию.
    Внутри func коммитить нельзя: соединение должно оставаться
    тем же, на котором стоит ограничение. При ошибке транзакция
    откатывается, исключение пробрасывается дальше.
    """
    def _call():
        try:
            with statement_timeout(db, timeout):
                result = func(db, *args, **kwargs)
            db.commit()
            return result
        except SQLAlchemyError:
            db.rollback()
            raise

    return await run_in_threadpool(_call)


def is_unique_violation(exc: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed", PostgreSQL: "duplicate key value violates unique constraint"
    return "unique" in str(exc.orig).lower()
