"""Модели базы данных проекта."""

import datetime
import math
import re
from typing import Any

from pydantic import field_validator
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

# Формат ID товара: три цифры, дефис, две цифры (например, 000-01)
PRODUCT_ID_PATTERN = r"^\d{3}-\d{2}$"
_PRODUCT_ID_RE = re.compile(PRODUCT_ID_PATTERN)


def utc_now() -> datetime.datetime:
    """Текущее время в UTC с tzinfo."""
    return datetime.datetime.now(datetime.UTC)


def as_utc(value: datetime.datetime) -> datetime.datetime:
    """
    Приводит момент времени к UTC.

    SQLite не хранит смещение, поэтому прочитанное из неё значение без
    tzinfo считается записанным в UTC.

    Args:
        value: Момент времени с tzinfo или без.

    Returns:
        Тот же момент времени с tzinfo=UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.UTC)
    return value.astimezone(datetime.UTC)


def is_valid_product_id(value: str) -> bool:
    """Проверяет, что строка соответствует формату ID товара."""
    return bool(_PRODUCT_ID_RE.fullmatch(value))


class ProductData(SQLModel):
    """Изменяемые поля товара, общие для всех моделей."""

    category: str = Field(min_length=1, max_length=100, index=True)
    name: str = Field(min_length=1, max_length=200, index=True)
    description: str | None = Field(default=None, max_length=1000)
    quantity: int = Field(ge=0)
    unit_price: float = Field(ge=0)
    code: str = Field(min_length=1, max_length=50, index=True)

    @field_validator("unit_price")
    @classmethod
    def require_finite_price(cls, value: float) -> float:
        """Отклоняет inf и nan."""
        if not math.isfinite(value):
            raise ValueError("unit_price must be a finite number")
        return value

    @field_validator("category", "name", "description", "code", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        """Обрезает пробелы по краям текстовых полей."""
        if isinstance(value, str):
            return value.strip()
        return value


class ProductCreate(ProductData):
    """Данные для создания товара."""

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def check_id_format(cls, value: Any) -> Any:
        """Проверяет формат ID (XXX-XX)."""
        if isinstance(value, str):
            value = value.strip()
            if is_valid_product_id(value):
                return value
        raise ValueError("ID must be in format XXX-XX")


class ProductUpdate(ProductData):
    """Данные для обновления товара: полная замена изменяемых полей."""


class Product(ProductData, table=True):
    """Модель товара каталога."""

    __tablename__ = "products"  # type: ignore[assignment]

    id: str = Field(primary_key=True, max_length=6)
    created_at: datetime.datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True)
    )
    updated_at: datetime.datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True)
    )


class ProductRead(ProductData):
    """Публичное представление товара."""

    id: str
    created_at: datetime.datetime
    updated_at: datetime.datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamp(cls, value: datetime.datetime) -> datetime.datetime:
        """Отдаёт отметки времени в UTC с tzinfo."""
        return as_utc(value)
