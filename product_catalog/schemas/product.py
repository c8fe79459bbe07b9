"""Pydantic-схемы запросов и ответов каталога."""

import datetime
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from product_catalog.db.models import ProductRead

# Колонки, по которым разрешена сортировка. Имя колонки нельзя передать
# связанным параметром, поэтому все остальные значения заменяются на "id".
SORTABLE_COLUMNS: frozenset[str] = frozenset(
    {"id", "name", "category", "quantity", "unit_price", "code"}
)
DEFAULT_SORT_COLUMN = "id"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
# Наибольшее значение, которое движок принимает в LIMIT и OFFSET (знаковое 64-бит)
MAX_SQL_INTEGER = 2**63 - 1


def _coerce_positive_int(value: Any, default: int) -> int:
    """
    Приводит значение к положительному int, иначе возвращает default.

    Args:
        value: Сырое значение из строки запроса.
        default: Значение для отсутствующего или некорректного ввода.

    Returns:
        Целое число от 1 до MAX_SQL_INTEGER.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        # Дробные строки вроде "2.5" считаются нечисловыми и дают default
        number = int(str(value).strip())
    except ValueError:
        return default
    if number <= 0:
        return default
    return min(number, MAX_SQL_INTEGER)


class ProductFilter(BaseModel):
    """
    Параметры фильтрации, сортировки и пагинации списка товаров.

    Необязательные фильтры равны None, если не переданы; пустая строка
    считается переданным, но пустым значением и условия не добавляет.
    """

    category: str | None = None
    search: str | None = None
    min_price: float | None = Field(default=None, allow_inf_nan=False)
    max_price: float | None = Field(default=None, allow_inf_nan=False)
    sort_by: str = DEFAULT_SORT_COLUMN
    order: str = "ASC"
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @field_validator("sort_by", mode="before")
    @classmethod
    def restrict_sort_column(cls, value: Any) -> str:
        """Оставляет колонку из SORTABLE_COLUMNS, иначе сортирует по id."""
        if isinstance(value, str) and value in SORTABLE_COLUMNS:
            return value
        return DEFAULT_SORT_COLUMN

    @field_validator("order", mode="before")
    @classmethod
    def normalize_order(cls, value: Any) -> str:
        """Любое значение, кроме DESC (без учёта регистра), даёт ASC."""
        if isinstance(value, str) and value.strip().upper() == "DESC":
            return "DESC"
        return "ASC"

    @field_validator("page", mode="before")
    @classmethod
    def coerce_page(cls, value: Any) -> int:
        """Номер страницы, по умолчанию 1."""
        return _coerce_positive_int(value, DEFAULT_PAGE)

    @field_validator("limit", mode="before")
    @classmethod
    def coerce_limit(cls, value: Any) -> int:
        """Размер страницы, по умолчанию 20."""
        return _coerce_positive_int(value, DEFAULT_LIMIT)

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def blank_price_to_none(cls, value: Any) -> Any:
        """Пустая строка означает, что граница цены не задана."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def offset(self) -> int:
        """Смещение первой строки страницы, не больше MAX_SQL_INTEGER."""
        return min((self.page - 1) * self.limit, MAX_SQL_INTEGER)

    @property
    def descending(self) -> bool:
        """True, если сортировка по убыванию."""
        return self.order == "DESC"


class CamelModel(BaseModel):
    """Базовая модель ответа с camelCase-ключами в JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Pagination(CamelModel):
    """Метаданные страницы."""

    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        """
        Считает метаданные страницы.

        Args:
            page: Номер страницы (с 1).
            limit: Размер страницы.
            total: Общее количество подходящих строк.

        Returns:
            Объект Pagination с total_pages = ceil(total / limit).
        """
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        )


class ProductPage(BaseModel):
    """Страница товаров вместе с метаданными пагинации."""

    products: list[ProductRead]
    pagination: Pagination


class CategoryBreakdown(CamelModel):
    category: str
    count: int
    total_quantity: int


class StatisticsReport(CamelModel):
    """Сводная статистика по всей таблице товаров."""

    total_products: int
    total_quantity: int
    # Цены отдаются строками с двумя знаками после запятой ("79.20")
    average_price: str
    min_price: str
    max_price: str
    category_count: int
    category_breakdown: list[CategoryBreakdown]
    timestamp: datetime.datetime


class ProductMutationResult(BaseModel):
    id: str
    message: str


class MessageResponse(BaseModel):
    message: str


class HealthStatus(BaseModel):
    status: str = "ok"
    timestamp: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC)
    )
