from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from sqlmodel import SQLModel

from alembic import context  # type: ignore[attr-defined]
from product_catalog.core.config import settings
from product_catalog.db import models  # noqa: F401

# Объект конфигурации Alembic с доступом к значениям из alembic.ini.
config = context.config

# Настраиваем логгеры из секций alembic.ini.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Метаданные SQLModel-моделей для автогенерации миграций.
target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """Запуск миграций в 'оффлайн' режиме.

    Контекст конфигурируется только URL, без создания Engine,
    поэтому DBAPI-драйвер не нужен. Вызовы context.execute()
    выводят SQL в выходной файл скрипта.
    """
    context.configure(
        url=settings.sync_database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Запуск миграций в 'онлайн' режиме.

    Alembic работает синхронно, поэтому используется URL
    с синхронным драйвером из настроек.
    """
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = settings.sync_database_url

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,  # ALTER TABLE в SQLite через пересоздание таблицы
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
