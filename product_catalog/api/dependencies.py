"""Зависимости (dependencies) FastAPI для эндпоинтов каталога."""

from typing import Annotated

from fastapi import Depends, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from product_catalog.db.session import get_db_session
from product_catalog.schemas.product import ProductFilter

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_product_filter(
    category: str | None = None,
    search: str | None = None,
    min_price: Annotated[str | None, Query(alias="minPrice")] = None,
    max_price: Annotated[str | None, Query(alias="maxPrice")] = None,
    sort_by: Annotated[str, Query(alias="sortBy")] = "id",
    order: str = "ASC",
    page: str | None = None,
    limit: str | None = None,
) -> ProductFilter:
    """
    Собирает ProductFilter из строки запроса.

    page и limit принимаются строками: нечисловые значения не являются
    ошибкой и заменяются значениями по умолчанию внутри ProductFilter.

    Raises:
        RequestValidationError: Если minPrice или maxPrice не конечное число.
    """
    try:
        return ProductFilter(
            category=category,
            search=search,
            min_price=min_price,  # type: ignore[arg-type]
            max_price=max_price,  # type: ignore[arg-type]
            sort_by=sort_by,
            order=order,
            page=page,  # type: ignore[arg-type]
            limit=limit,  # type: ignore[arg-type]
        )
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


ProductFilterDep = Annotated[ProductFilter, Depends(get_product_filter)]
