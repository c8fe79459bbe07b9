"""Конфигурация и фикстуры для тестов Pytest."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)

from product_catalog.db.seed import seed_products
from product_catalog.db.session import (
    create_engine,
    create_session_factory,
    get_db_session,
    init_models,
)
from product_catalog.main import app


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Фикстура для создания асинхронного движка БД для тестов.

    Каждый тест получает собственный файл SQLite (aiosqlite).
    """
    async_engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_models(async_engine)

    yield async_engine

    await async_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Фикстура, создающая фабрику сессий для тестов.
    """
    return create_session_factory(engine)


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Фикстура, предоставляющая изолированную сессию БД для каждого теста.
    """
    async with session_factory() as db_session:
        yield db_session


@pytest.fixture
async def seeded(session_factory: async_sessionmaker[AsyncSession]) -> int:
    """
    Заполняет базу эталонными товарами 000-01..000-10.
    """
    async with session_factory() as db_session:
        return await seed_products(db_session)


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP-клиент для приложения с подмененной зависимостью сессии БД.
    """

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as db_session:
            yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()
