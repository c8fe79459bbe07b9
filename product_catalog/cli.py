"""
Служебные команды каталога: создание таблиц, загрузка эталонных данных,
запуск сервера.

Примеры:
    product-catalog init-db --reset
    product-catalog seed
    product-catalog serve --port 3000
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import uvicorn

from product_catalog.core.config import settings
from product_catalog.db.seed import seed_products
from product_catalog.db.session import (
    create_engine,
    create_session_factory,
    drop_models,
    init_models,
)


def _ensure_sqlite_dir() -> None:
    if settings.database_url.startswith("sqlite"):
        Path(settings.DB_PATH).parent.mkdir(parents=True, exist_ok=True)


async def _init_db(reset: bool) -> None:
    engine = create_engine(settings.database_url)
    try:
        if reset:
            await drop_models(engine)
            logging.info("Existing tables dropped")
        await init_models(engine)
        logging.info("Products table is ready")
    finally:
        await engine.dispose()


async def _seed() -> int:
    engine = create_engine(settings.database_url)
    try:
        await init_models(engine)
        async with create_session_factory(engine)() as session:
            return await seed_products(session)
    finally:
        await engine.dispose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="product-catalog", description="Product catalog maintenance commands"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init-db", help="Create the products table")
    init_parser.add_argument(
        "--reset", action="store_true", help="Drop existing tables first"
    )

    subparsers.add_parser("seed", help="Load the reference products")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--host", default=settings.HOST)
    serve_parser.add_argument("--port", type=int, default=settings.PORT)
    serve_parser.add_argument("--reload", action="store_true")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(message)s")

    if args.command == "init-db":
        _ensure_sqlite_dir()
        asyncio.run(_init_db(args.reset))
        print("Database initialization complete!")
        return 0

    if args.command == "seed":
        _ensure_sqlite_dir()
        inserted = asyncio.run(_seed())
        print(f"Successfully seeded {inserted} products into database")
        return 0

    uvicorn.run(
        "product_catalog.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
