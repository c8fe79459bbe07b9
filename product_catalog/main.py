"""Главный файл приложения. Точка входа."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import func
from sqlmodel import select

from product_catalog.api import products
from product_catalog.api.errors import register_exception_handlers
from product_catalog.core.config import settings
from product_catalog.db.models import Product
from product_catalog.db.seed import seed_products
from product_catalog.db.session import (
    create_engine,
    create_session_factory,
    init_models,
)
from product_catalog.middlewares.request_logging import RequestLoggingMiddleware


def setup_logging(level: str) -> None:
    """Настраивает корневой логгер приложения."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Контекстный менеджер для управления жизненным циклом приложения.
    """
    setup_logging(settings.LOG_LEVEL)
    logging.info("--- LIFESPAN START ---")

    if settings.database_url.startswith("sqlite"):
        Path(settings.DB_PATH).parent.mkdir(parents=True, exist_ok=True)

    logging.info("1. Opening database engine...")
    engine = create_engine(settings.database_url, echo=settings.SQL_ECHO)
    session_factory = create_session_factory(engine)

    # Сохраняем экземпляры в app.state для доступа в зависимостях
    app.state.engine = engine
    app.state.session_factory = session_factory

    logging.info("2. Creating missing tables...")
    await init_models(engine)

    if settings.SEED_ON_STARTUP:
        logging.info("3. Seeding reference products...")
        async with session_factory() as session:
            count = (
                await session.execute(select(func.count()).select_from(Product))
            ).scalar_one()
            if count == 0:
                await seed_products(session)
            else:
                logging.info("-> Table is not empty (%d rows), seeding skipped.", count)

    logging.info("--- LIFESPAN STARTUP COMPLETE. APP IS READY. ---")

    yield

    logging.info("--- LIFESPAN SHUTDOWN ---")
    await engine.dispose()
    logging.info("--- LIFESPAN SHUTDOWN COMPLETE ---")


# --- Приложение FastAPI ---
app = FastAPI(
    title="Product Catalog API",
    description="Product catalog with filtering, pagination, statistics and CSV export",
    version="2.0.0",
    docs_url="/api-docs",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(products.router)

# Статика подключается последней, чтобы не перекрывать маршруты /api
if Path(settings.STATIC_DIR).is_dir():
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")


# --- Точка входа для локального запуска ---
if __name__ == "__main__":
    uvicorn.run(
        "product_catalog.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True,
    )
