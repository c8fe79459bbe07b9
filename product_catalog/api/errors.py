"""Преобразование исключений предметной области в HTTP-ответы."""

from collections.abc import Iterable
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from product_catalog.core.exceptions import (
    ProductAlreadyExistsError,
    ProductNotFoundError,
    ProductValidationError,
    StorageError,
)


def _format_errors(errors: Iterable[Any]) -> list[dict[str, Any]]:
    # ctx может содержать объекты исключений, которые не сериализуются в JSON
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": str(error.get("msg", "")),
            "type": str(error.get("type", "")),
        }
        for error in errors
    ]


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": _format_errors(exc.errors())},
    )


async def product_validation_handler(
    request: Request, exc: ProductValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": [{"loc": [], "msg": str(exc), "type": "value_error"}]},
    )


async def product_not_found_handler(
    request: Request, exc: ProductNotFoundError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "Product not found"},
    )


async def product_exists_handler(
    request: Request, exc: ProductAlreadyExistsError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"error": "Product already exists"},
    )


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Отдает клиенту только общее сообщение; подробности уже в логах."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Регистрирует обработчики исключений каталога.

    Args:
        app: Экземпляр приложения FastAPI.
    """
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ProductValidationError, product_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ProductNotFoundError, product_not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ProductAlreadyExistsError, product_exists_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StorageError, storage_error_handler)  # type: ignore[arg-type]
