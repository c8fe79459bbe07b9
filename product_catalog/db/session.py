"""Настройка сессии базы данных."""

from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

# Регистрируем модели в метаданных
from product_catalog.db import models  # noqa: F401


def _set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
    """Включает WAL и проверку внешних ключей для каждого соединения SQLite."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL;")
    cursor.execute("PRAGMA foreign_keys=ON;")
    cursor.close()


def create_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Создает асинхронный "движок" SQLAlchemy.

    Движок создается один раз при старте приложения и закрывается
    при остановке (см. lifespan в main.py).

    Args:
        url: Строка подключения (async-драйвер).
        echo: Логировать ли SQL-запросы.

    Returns:
        Асинхронный движок.
    """
    engine = create_async_engine(
        url,
        echo=echo,
        pool_pre_ping=True,  # Проверяет "живо" ли соединение перед использованием
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Создает фабрику асинхронных сессий для переданного движка.

    Args:
        engine: Асинхронный движок.

    Returns:
        Фабрика сессий.
    """
    return async_sessionmaker(
        engine,
        autoflush=False,
        expire_on_commit=False,
        class_=AsyncSession,
    )


async def init_models(engine: AsyncEngine) -> None:
    """
    Создает недостающие таблицы. Существующие таблицы не трогает.

    Args:
        engine: Асинхронный движок.
    """
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def drop_models(engine: AsyncEngine) -> None:
    """
    Удаляет все таблицы проекта.

    Args:
        engine: Асинхронный движок.
    """
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Зависимость (dependency) для получения сессии базы данных.

    Фабрика сессий берется из app.state, куда ее кладет lifespan.

    Yields:
        Объект асинхронной сессии SQLAlchemy.
    """
    session_factory: async_sessionmaker[AsyncSession] = (
        request.app.state.session_factory
    )
    async with session_factory() as session:
        yield session
