"""Экспорт каталога в CSV."""

import csv
import io
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from product_catalog.core.exceptions import storage_errors
from product_catalog.db.models import Product

CSV_HEADER = ["ID", "Category", "Name", "Description", "Quantity", "Unit Price", "Code"]


def render_products_csv(products: Iterable[Product]) -> str:
    """
    Формирует CSV из товаров.

    Строка заголовка выводится без кавычек. В строках данных текстовые поля
    заключаются в двойные кавычки, а кавычки внутри значения удваиваются;
    числа выводятся без кавычек.

    Args:
        products: Товары в нужном порядке.

    Returns:
        Текст CSV, строки разделены "\\n".
    """
    buffer = io.StringIO()
    buffer.write(",".join(CSV_HEADER) + "\n")

    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for product in products:
        writer.writerow(
            [
                product.id,
                product.category,
                product.name,
                product.description or "",
                product.quantity,
                product.unit_price,
                product.code,
            ]
        )
    return buffer.getvalue()


async def export_products_csv(session: AsyncSession) -> str:
    """
    Выгружает все товары, отсортированные по ID, в CSV.

    Raises:
        StorageError: При ошибке базы данных.
    """
    statement = select(Product).order_by(col(Product.id))
    with storage_errors("Failed to export products"):
        result = await session.execute(statement)
        products = result.scalars().all()
    return render_products_csv(products)
