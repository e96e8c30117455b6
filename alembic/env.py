# alembic/env.py
# Миграции схемы магазина. URL и параметры драйвера берутся из storefront,
# поэтому миграции и приложение подключаются к БД одинаково (включая timeout для SQLite).

import logging
from logging.config import fileConfig

from sqlalchemy import pool
from alembic import context

from storefront.core.config import settings
from storefront.db.base import Base
from storefront.db.session import build_engine

# Регистрируем таблицы в Base.metadata для autogenerate
import storefront.models.user  # noqa: F401
import storefront.models.product  # noqa: F401
import storefront.models.cart  # noqa: F401
import storefront.models.order  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata


def _configure_options(dialect_name: str) -> dict:
    """
    Общие опции для обоих режимов.
    SQLite не умеет ALTER COLUMN, поэтому для него миграции идут batch-режимом
    (копирование таблицы); compare_type ловит смену Numeric/Enum при autogenerate.
    """
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": dialect_name == "sqlite",
    }


def run_migrations_offline() -> None:
    """Генерирует SQL-скрипт без подключения к БД (alembic upgrade --sql)."""
    url = settings.DATABASE_URL
    dialect_name = url.split(":", 1)[0].split("+", 1)[0]
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(dialect_name),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Применяет миграции через engine приложения; NullPool, чтобы не держать соединения."""
    connectable = build_engine(settings.DATABASE_URL, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_options(connection.dialect.name))

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    logger.info("📝 Running storefront migrations in OFFLINE mode")
    run_migrations_offline()
else:
    logger.info("🚀 Running storefront migrations in ONLINE mode against %s", settings.DATABASE_URL.split("@")[-1])
    run_migrations_online()
