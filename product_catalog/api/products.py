"""HTTP-эндпоинты каталога товаров."""

from collections.abc import Sequence
from typing import Annotated

from fastapi import APIRouter, Path, Response, status

from product_catalog.api.dependencies import ProductFilterDep, SessionDep
from product_catalog.db.models import (
    PRODUCT_ID_PATTERN,
    Product,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from product_catalog.schemas.product import (
    HealthStatus,
    MessageResponse,
    ProductMutationResult,
    ProductPage,
    StatisticsReport,
)
from product_catalog.services import catalog_query, export_service, product_service

router = APIRouter(prefix="/api")

ProductId = Annotated[
    str, Path(pattern=PRODUCT_ID_PATTERN, description="ID товара в формате XXX-XX")
]


@router.get("/products", response_model=ProductPage, tags=["Products"])
async def list_products(
    session: SessionDep, product_filter: ProductFilterDep
) -> ProductPage:
    """
    Список товаров с фильтрацией, поиском, сортировкой и пагинацией.
    """
    return await catalog_query.list_products(session, product_filter)


@router.get("/products/export/csv", tags=["Products"])
async def export_products(session: SessionDep) -> Response:
    """
    Выгрузка всех товаров в CSV.
    """
    content = await export_service.export_products_csv(session)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=products.csv"},
    )


@router.get(
    "/products/category/{category}",
    response_model=list[ProductRead],
    tags=["Products"],
)
async def list_products_by_category(
    category: str, session: SessionDep
) -> Sequence[Product]:
    """
    Товары, категория которых содержит подстроку (без пагинации).
    """
    return await product_service.list_products_by_category(session, category)


@router.get("/products/{product_id}", response_model=ProductRead, tags=["Products"])
async def get_product(product_id: ProductId, session: SessionDep) -> Product:
    """
    Товар по ID.
    """
    return await product_service.get_product(session, product_id)


@router.post(
    "/products",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductMutationResult,
    tags=["Products"],
)
async def create_product(
    payload: ProductCreate, session: SessionDep
) -> ProductMutationResult:
    """
    Создание товара.
    """
    product = await product_service.create_product(session, payload)
    return ProductMutationResult(id=product.id, message="Product created successfully")


@router.put(
    "/products/{product_id}",
    response_model=ProductMutationResult,
    tags=["Products"],
)
async def update_product(
    product_id: ProductId, payload: ProductUpdate, session: SessionDep
) -> ProductMutationResult:
    """
    Обновление товара: все изменяемые поля заменяются значениями из тела.
    """
    await product_service.update_product(session, product_id, payload)
    return ProductMutationResult(id=product_id, message="Product updated successfully")


@router.delete(
    "/products/{product_id}", response_model=MessageResponse, tags=["Products"]
)
async def delete_product(product_id: ProductId, session: SessionDep) -> MessageResponse:
    """
    Удаление товара.
    """
    await product_service.delete_product(session, product_id)
    return MessageResponse(message="Product deleted successfully")


@router.get("/categories", response_model=list[str], tags=["Categories"])
async def list_categories(session: SessionDep) -> list[str]:
    """
    Уникальные категории в порядке сортировки.
    """
    return await product_service.get_categories(session)


@router.get("/statistics", response_model=StatisticsReport, tags=["Statistics"])
async def get_statistics(session: SessionDep) -> StatisticsReport:
    """
    Сводная статистика по каталогу.
    """
    return await catalog_query.get_statistics(session)


@router.get("/health", response_model=HealthStatus, tags=["System"])
async def health_check() -> HealthStatus:
    """
    Проверка работоспособности сервиса.
    """
    return HealthStatus()
