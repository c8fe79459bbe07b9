"""Сервисный слой для управления товарами."""

import logging
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from product_catalog.core.exceptions import (
    ProductAlreadyExistsError,
    ProductNotFoundError,
    ProductValidationError,
    storage_errors,
)
from product_catalog.db.models import (
    Product,
    ProductCreate,
    ProductUpdate,
    is_valid_product_id,
    utc_now,
)


def ensure_valid_product_id(product_id: str) -> None:
    """
    Проверяет формат ID до обращения к базе.

    Raises:
        ProductValidationError: Если ID не соответствует формату XXX-XX.
    """
    if not is_valid_product_id(product_id):
        raise ProductValidationError("Invalid ID format")


async def create_product(session: AsyncSession, data: ProductCreate) -> Product:
    """
    Создает новый товар в базе данных.

    Args:
        session: Сессия базы данных.
        data: Проверенные данные товара.

    Returns:
        Созданный объект товара.

    Raises:
        ProductAlreadyExistsError: Если товар с таким ID уже есть.
        StorageError: При ошибке базы данных.
    """
    with storage_errors("Failed to create product"):
        if await session.get(Product, data.id) is not None:
            raise ProductAlreadyExistsError(data.id)

        db_product = Product.model_validate(data)
        session.add(db_product)
        # Гонка двух вставок с одним ID ловится ограничением первичного ключа
        try:
            await session.commit()
        except IntegrityError as exc:
            await session.rollback()
            logging.warning("Duplicate product id rejected: %s", data.id)
            raise ProductAlreadyExistsError(data.id) from exc
        await session.refresh(db_product)

    logging.info("Product created: %s", db_product.id)
    return db_product


async def get_product(session: AsyncSession, product_id: str) -> Product:
    """
    Находит товар по ID.

    Args:
        session: Сессия базы данных.
        product_id: ID товара в формате XXX-XX.

    Returns:
        Объект Product.

    Raises:
        ProductValidationError: Если ID имеет неверный формат.
        ProductNotFoundError: Если товар не найден.
        StorageError: При ошибке базы данных.
    """
    ensure_valid_product_id(product_id)
    with storage_errors("Failed to fetch product"):
        db_product = await session.get(Product, product_id)
    if db_product is None:
        raise ProductNotFoundError(product_id)
    return db_product


async def update_product(
    session: AsyncSession, product_id: str, data: ProductUpdate
) -> Product:
    """
    Полностью заменяет изменяемые поля товара. ID не меняется.

    Повторный вызов с теми же данными оставляет товар в том же состоянии.

    Args:
        session: Сессия базы данных.
        product_id: ID товара для обновления.
        data: Новые значения полей.

    Returns:
        Обновленный объект Product.

    Raises:
        ProductValidationError: Если ID имеет неверный формат.
        ProductNotFoundError: Если товар не найден.
        StorageError: При ошибке базы данных.
    """
    db_product = await get_product(session, product_id)

    db_product.sqlmodel_update(data.model_dump())
    db_product.updated_at = utc_now()

    with storage_errors("Failed to update product"):
        session.add(db_product)
        await session.commit()
        await session.refresh(db_product)

    logging.info("Product updated: %s", product_id)
    return db_product


async def delete_product(session: AsyncSession, product_id: str) -> None:
    """
    Удаляет товар.

    Args:
        session: Сессия базы данных.
        product_id: ID товара для удаления.

    Raises:
        ProductValidationError: Если ID имеет неверный формат.
        ProductNotFoundError: Если товар не найден (в том числе уже удален).
        StorageError: При ошибке базы данных.
    """
    db_product = await get_product(session, product_id)
    with storage_errors("Failed to delete product"):
        await session.delete(db_product)
        await session.commit()

    logging.info("Product deleted: %s", product_id)


async def list_products_by_category(
    session: AsyncSession, category: str
) -> Sequence[Product]:
    """
    Возвращает товары, категория которых содержит подстроку, без пагинации.

    Args:
        session: Сессия базы данных.
        category: Подстрока категории.

    Returns:
        Последовательность объектов Product, отсортированная по названию.
    """
    statement = (
        select(Product)
        .where(col(Product.category).contains(category, autoescape=True))
        .order_by(col(Product.name), col(Product.id))
    )
    with storage_errors("Failed to fetch products"):
        result = await session.execute(statement)
        return result.scalars().all()


async def get_categories(session: AsyncSession) -> list[str]:
    """
    Возвращает список уникальных категорий в порядке сортировки.

    Регистр не нормализуется: "clothing" и "Clothing" - разные категории.
    """
    statement = (
        select(col(Product.category)).distinct().order_by(col(Product.category))
    )
    with storage_errors("Failed to fetch categories"):
        result = await session.execute(statement)
        return list(result.scalars().all())
