"""
Движок запросов каталога: фильтрация, сортировка, пагинация и статистика.

Все значения фильтров попадают в SQL только как связанные параметры.
Колонка сортировки выбирается из фиксированного словаря объектов колонок,
поэтому пользовательская строка в текст запроса не подставляется.
"""

import datetime
import logging
from typing import Any

from sqlalchemy import ColumnElement, and_, func, or_, true
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from product_catalog.core.exceptions import storage_errors
from product_catalog.db.models import Product, ProductRead
from product_catalog.schemas.product import (
    CategoryBreakdown,
    Pagination,
    ProductFilter,
    ProductPage,
    StatisticsReport,
)

SORT_COLUMN_MAP: dict[str, Any] = {
    "id": col(Product.id),
    "name": col(Product.name),
    "category": col(Product.category),
    "quantity": col(Product.quantity),
    "unit_price": col(Product.unit_price),
    "code": col(Product.code),
}


def build_where_clause(product_filter: ProductFilter) -> ColumnElement[bool]:
    """
    Собирает условие WHERE из переданных фильтров.

    Базовое условие - "все строки"; каждый непустой фильтр добавляет
    одно условие через AND.

    Args:
        product_filter: Параметры фильтрации.

    Returns:
        Готовое условие, общее для запроса количества и запроса страницы.
    """
    conditions: list[ColumnElement[bool]] = []

    if product_filter.category:
        conditions.append(
            col(Product.category).contains(product_filter.category, autoescape=True)
        )

    if product_filter.search:
        term = product_filter.search
        conditions.append(
            or_(
                col(Product.name).contains(term, autoescape=True),
                col(Product.description).contains(term, autoescape=True),
                col(Product.code).contains(term, autoescape=True),
            )
        )

    if product_filter.min_price is not None:
        conditions.append(col(Product.unit_price) >= product_filter.min_price)

    if product_filter.max_price is not None:
        conditions.append(col(Product.unit_price) <= product_filter.max_price)

    return and_(true(), *conditions)


def build_order_by(product_filter: ProductFilter) -> list[Any]:
    """
    Возвращает выражения ORDER BY для запроса страницы.

    Последним всегда идет id ASC, чтобы порядок был полным и страницы
    не пересекались при одинаковых значениях колонки сортировки.
    """
    column = SORT_COLUMN_MAP.get(product_filter.sort_by, col(Product.id))
    ordering = [column.desc() if product_filter.descending else column.asc()]
    if product_filter.sort_by != "id":
        ordering.append(col(Product.id).asc())
    return ordering


async def list_products(
    session: AsyncSession, product_filter: ProductFilter
) -> ProductPage:
    """
    Возвращает страницу товаров и метаданные пагинации.

    Запрос количества и запрос страницы используют одно и то же условие
    WHERE. Между ними нет отдельной изоляции: конкурентная запись может
    изменить total относительно возвращенной страницы.

    Args:
        session: Сессия базы данных.
        product_filter: Параметры фильтрации, сортировки и пагинации.

    Returns:
        Объект ProductPage.

    Raises:
        StorageError: Если запрос к базе завершился ошибкой.
    """
    where_clause = build_where_clause(product_filter)

    count_statement = select(func.count()).select_from(Product).where(where_clause)
    page_statement = (
        select(Product)
        .where(where_clause)
        .order_by(*build_order_by(product_filter))
        .offset(product_filter.offset)
        .limit(product_filter.limit)
    )

    with storage_errors("Failed to fetch products"):
        total = (await session.execute(count_statement)).scalar_one()
        rows = (await session.execute(page_statement)).scalars().all()

    return ProductPage(
        products=[ProductRead.model_validate(row) for row in rows],
        pagination=Pagination.build(
            page=product_filter.page, limit=product_filter.limit, total=total
        ),
    )


def _format_price(value: float | None) -> str:
    return f"{value or 0:.2f}"


async def get_statistics(session: AsyncSession) -> StatisticsReport:
    """
    Считает сводную статистику по таблице товаров.

    Группировка по категориям идет по точному значению строки:
    "clothing" и "Clothing" - разные группы.

    Args:
        session: Сессия базы данных.

    Returns:
        Объект StatisticsReport.

    Raises:
        StorageError: Если хотя бы один из запросов завершился ошибкой.
    """
    summary_statement = select(
        func.count(col(Product.id)),
        func.coalesce(func.sum(col(Product.quantity)), 0),
        func.avg(col(Product.unit_price)),
        func.min(col(Product.unit_price)),
        func.max(col(Product.unit_price)),
        func.count(func.distinct(col(Product.category))),
    )
    breakdown_statement = (
        select(
            col(Product.category),
            func.count(col(Product.id)),
            func.coalesce(func.sum(col(Product.quantity)), 0),
        )
        .group_by(col(Product.category))
        .order_by(col(Product.category))
    )

    with storage_errors("Failed to fetch statistics"):
        summary = (await session.execute(summary_statement)).one()
        breakdown_rows = (await session.execute(breakdown_statement)).all()

    total, total_quantity, avg_price, min_price, max_price, category_count = summary
    logging.debug("Statistics computed over %d products", total)

    return StatisticsReport(
        total_products=total,
        total_quantity=total_quantity,
        average_price=_format_price(avg_price),
        min_price=_format_price(min_price),
        max_price=_format_price(max_price),
        category_count=category_count,
        category_breakdown=[
            CategoryBreakdown(category=category, count=count, total_quantity=quantity)
            for category, count, quantity in breakdown_rows
        ],
        timestamp=datetime.datetime.now(datetime.UTC),
    )
