"""Тесты HTTP-эндпоинтов каталога."""

import datetime
import json

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from product_catalog.core.exceptions import StorageError
from product_catalog.services import catalog_query, product_service

NEW_PRODUCT = {
    "id": "000-99",
    "category": "test",
    "name": "New Test Product",
    "description": "Test Description",
    "quantity": 50,
    "unit_price": 25.0,
    "code": "000-99",
}


async def test_health(client: AsyncClient) -> None:
    response = await client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert "timestamp" in body


async def test_list_products_default(client: AsyncClient, seeded: int) -> None:
    response = await client.get("/api/products")

    assert response.status_code == 200
    body = response.json()
    assert [p["id"] for p in body["products"]] == [f"000-{n:02d}" for n in range(1, 11)]
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 10, "totalPages": 1}


async def test_list_products_by_category_with_pagination(
    client: AsyncClient, seeded: int
) -> None:
    response = await client.get(
        "/api/products", params={"category": "clothing", "page": 1, "limit": 5}
    )

    assert response.status_code == 200
    body = response.json()
    assert len(body["products"]) <= 5
    assert all("clothing" in p["category"].lower() for p in body["products"])
    assert body["pagination"]["total"] == 5


async def test_list_products_query_parameters(client: AsyncClient, seeded: int) -> None:
    response = await client.get(
        "/api/products",
        params={
            "minPrice": "60",
            "maxPrice": "100",
            "sortBy": "unit_price",
            "order": "desc",
            "page": "1",
            "limit": "2",
        },
    )

    body = response.json()
    assert [p["id"] for p in body["products"]] == ["000-06", "000-03"]
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 5, "totalPages": 3}


async def test_list_products_ignores_bad_sort_and_paging(
    client: AsyncClient, seeded: int
) -> None:
    response = await client.get(
        "/api/products",
        params={"sortBy": "name; DROP TABLE products", "page": "abc", "limit": "0"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["products"][0]["id"] == "000-01"
    assert body["pagination"]["page"] == 1
    assert body["pagination"]["limit"] == 20


async def test_list_products_rejects_non_numeric_price(client: AsyncClient) -> None:
    response = await client.get("/api/products", params={"minPrice": "cheap"})

    assert response.status_code == 400
    assert "errors" in response.json()


@pytest.mark.parametrize(
    "params",
    [
        {"limit": str(10**30)},
        {"page": str(10**19)},
        {"page": str(10**19), "limit": str(10**19)},
    ],
)
async def test_list_products_with_huge_paging_values(
    client: AsyncClient, seeded: int, params: dict[str, str]
) -> None:
    response = await client.get("/api/products", params=params)

    assert response.status_code == 200
    assert response.json()["pagination"]["total"] == 10


@pytest.mark.parametrize(
    "params", [{"minPrice": "nan"}, {"maxPrice": "inf"}, {"minPrice": "-Infinity"}]
)
async def test_list_products_rejects_non_finite_price(
    client: AsyncClient, params: dict[str, str]
) -> None:
    response = await client.get("/api/products", params=params)

    assert response.status_code == 400
    assert "errors" in response.json()


async def test_get_product(client: AsyncClient, seeded: int) -> None:
    response = await client.get("/api/products/000-01")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "000-01"
    assert body["category"] == "clothing"
    assert body["unit_price"] == 30.0


async def test_get_missing_product(client: AsyncClient) -> None:
    response = await client.get("/api/products/999-99")

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


async def test_get_product_with_malformed_id(client: AsyncClient) -> None:
    response = await client.get("/api/products/bad-id")

    assert response.status_code == 400


async def test_products_by_category_endpoint(client: AsyncClient, seeded: int) -> None:
    response = await client.get("/api/products/category/wear")

    assert response.status_code == 200
    assert {p["id"] for p in response.json()} == {"000-08", "000-09"}


async def test_create_product(
    client: AsyncClient, session_factory: async_sessionmaker[AsyncSession]
) -> None:
    response = await client.post("/api/products", json=NEW_PRODUCT)

    assert response.status_code == 201
    assert response.json() == {"id": "000-99", "message": "Product created successfully"}

    fetched = (await client.get("/api/products/000-99")).json()
    for field, value in NEW_PRODUCT.items():
        assert fetched[field] == value


async def test_created_product_has_utc_timestamps(client: AsyncClient) -> None:
    await client.post("/api/products", json=NEW_PRODUCT)

    body = (await client.get("/api/products/000-99")).json()

    for field in ("created_at", "updated_at"):
        stamp = datetime.datetime.fromisoformat(body[field])
        assert stamp.utcoffset() == datetime.timedelta(0)


@pytest.mark.parametrize("price", ["Infinity", "-Infinity", "NaN"])
async def test_create_product_with_non_finite_price_stores_nothing(
    client: AsyncClient, session_factory: async_sessionmaker[AsyncSession], price: str
) -> None:
    body = json.dumps({**NEW_PRODUCT, "unit_price": 0}).replace(
        '"unit_price": 0', f'"unit_price": {price}'
    )

    response = await client.post(
        "/api/products", content=body, headers={"content-type": "application/json"}
    )

    assert response.status_code == 400
    async with session_factory() as session:
        assert await product_service.get_categories(session) == []
    statistics = (await client.get("/api/statistics")).json()
    assert statistics["averagePrice"] == "0.00"


async def test_create_product_with_bad_id_stores_nothing(
    client: AsyncClient, session_factory: async_sessionmaker[AsyncSession]
) -> None:
    response = await client.post("/api/products", json={**NEW_PRODUCT, "id": "bad"})

    assert response.status_code == 400
    assert response.json()["errors"]

    async with session_factory() as session:
        assert await product_service.get_categories(session) == []


async def test_create_product_missing_fields(client: AsyncClient) -> None:
    response = await client.post("/api/products", json={"id": "invalid", "category": "test"})

    assert response.status_code == 400


async def test_create_duplicate_product(client: AsyncClient, seeded: int) -> None:
    response = await client.post("/api/products", json={**NEW_PRODUCT, "id": "000-01"})

    assert response.status_code == 409
    assert response.json() == {"error": "Product already exists"}


async def test_update_product_twice(client: AsyncClient, seeded: int) -> None:
    payload = {k: v for k, v in NEW_PRODUCT.items() if k != "id"}

    first = await client.put("/api/products/000-02", json=payload)
    state_after_first = (await client.get("/api/products/000-02")).json()
    second = await client.put("/api/products/000-02", json=payload)
    state_after_second = (await client.get("/api/products/000-02")).json()

    assert first.status_code == second.status_code == 200
    assert first.json() == {"id": "000-02", "message": "Product updated successfully"}
    state_after_first.pop("updated_at")
    state_after_second.pop("updated_at")
    assert state_after_first == state_after_second
    assert state_after_second["name"] == "New Test Product"


async def test_update_missing_product(client: AsyncClient) -> None:
    payload = {k: v for k, v in NEW_PRODUCT.items() if k != "id"}

    response = await client.put("/api/products/999-99", json=payload)

    assert response.status_code == 404


async def test_update_with_invalid_body(client: AsyncClient, seeded: int) -> None:
    payload = {k: v for k, v in NEW_PRODUCT.items() if k != "id"}

    response = await client.put("/api/products/000-02", json={**payload, "quantity": -3})

    assert response.status_code == 400


async def test_delete_product_twice(client: AsyncClient, seeded: int) -> None:
    first = await client.delete("/api/products/000-10")
    second = await client.delete("/api/products/000-10")

    assert first.status_code == 200
    assert first.json() == {"message": "Product deleted successfully"}
    assert second.status_code == 404


async def test_categories(client: AsyncClient, seeded: int) -> None:
    response = await client.get("/api/categories")

    assert response.status_code == 200
    categories = response.json()
    assert "clothing" in categories
    assert "Clothing" in categories
    assert len(categories) == 6


async def test_statistics(client: AsyncClient, seeded: int) -> None:
    response = await client.get("/api/statistics")

    assert response.status_code == 200
    body = response.json()
    assert body["totalProducts"] == 10
    assert body["totalQuantity"] == 1464
    assert body["averagePrice"] == "79.20"
    assert body["categoryCount"] == 6
    assert "timestamp" in body
    categories = [item["category"] for item in body["categoryBreakdown"]]
    assert "clothing" in categories
    assert "Clothing" in categories
    assert set(body["categoryBreakdown"][0]) == {"category", "count", "totalQuantity"}


async def test_export_csv(client: AsyncClient, seeded: int) -> None:
    await client.put(
        "/api/products/000-01",
        json={
            "category": "clothing",
            "name": "bohoo clothes",
            "description": 'The "MAN" collection',
            "quantity": 300,
            "unit_price": 30.0,
            "code": "000-01",
        },
    )

    response = await client.get("/api/products/export/csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "filename=products.csv" in response.headers["content-disposition"]
    lines = response.text.splitlines()
    assert lines[0] == "ID,Category,Name,Description,Quantity,Unit Price,Code"
    assert '"The ""MAN"" collection"' in lines[1]
    assert len(lines) == 11


async def test_storage_failure_returns_generic_error(
    client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def failing_list_products(*args: object, **kwargs: object) -> None:
        raise StorageError("Failed to fetch products")

    monkeypatch.setattr(catalog_query, "list_products", failing_list_products)

    response = await client.get("/api/products")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch products"}

    # Сервис продолжает обслуживать запросы после ошибки
    assert (await client.get("/api/health")).status_code == 200
