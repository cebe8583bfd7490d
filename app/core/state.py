# app/core/state.py

from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.cache import CacheStore
from app.core.config import Settings
from app.services.auth import MockSessionStore


@dataclass
class AppState:
    """
    Все разделяемые между запросами объекты приложения.
    Собирается один раз в create_app() и лежит в app.state.ctx.
    """
    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    cache: CacheStore
    sessions: MockSessionStore
