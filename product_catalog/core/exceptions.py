"""Исключения предметной области каталога."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError


class CatalogError(Exception):
    """Базовое исключение каталога товаров."""


class ProductValidationError(CatalogError, ValueError):
    """Некорректные входные данные (формат ID, диапазон поля и т.п.)."""


class ProductNotFoundError(CatalogError, LookupError):
    """Товар с указанным ID отсутствует."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class ProductAlreadyExistsError(CatalogError):
    """Товар с таким ID уже существует."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product {product_id} already exists")
        self.product_id = product_id


class StorageError(CatalogError):
    """
    Ошибка выполнения запроса к хранилищу.

    Сообщение предназначено для клиента и не содержит текста ошибки драйвера;
    исходное исключение доступно через __cause__.
    """


@contextmanager
def storage_errors(message: str) -> Iterator[None]:
    """
    Превращает ошибки хранилища в StorageError с общим сообщением.

    Args:
        message: Сообщение для клиента, например "Failed to fetch products".

    Raises:
        StorageError: Если внутри блока возникла ошибка SQLAlchemy или
            драйвер не смог передать число в запрос (OverflowError).
    """
    try:
        yield
    except (SQLAlchemyError, OverflowError) as exc:
        logging.exception("Storage failure: %s", message)
        raise StorageError(message) from exc
