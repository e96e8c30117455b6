# storefront/db/session.py
# Инициализация SQLAlchemy engine, фабрики сессий и границы транзакции.
# Поддерживает как Postgres, так и SQLite (для тестов/локального использования).

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from storefront.core.config import settings

DATABASE_URL = settings.DATABASE_URL


def build_engine(url: str, **kwargs):
    """Создаёт engine с настройками под конкретный драйвер; kwargs уходят в create_engine."""
    if url.startswith("sqlite"):
        # timeout: сколько конкурентный писатель ждёт блокировку вместо "database is locked"
        connect_args = {"check_same_thread": False, "timeout": settings.SQLITE_TIMEOUT}
        return create_engine(url, connect_args=connect_args, **kwargs)
    # pool_pre_ping полезен для долгоживущих соединений с Postgres
    return create_engine(url, pool_pre_ping=True, **kwargs)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Единица работы: commit при успехе, rollback и повторный raise при любой ошибке.
    Либо сохраняется всё, либо ничего.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
