"""SQLite implementation of the product catalog port."""

import aiosqlite

from printledger.config import get_logger
from printledger.core.entities.product import Product
from printledger.core.exceptions import ProductNotFoundError
from printledger.core.interfaces.product_store import IProductStore
from printledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteProductStore(IProductStore):
    """Finished-goods stock for catalog products."""

    async def get_product(self, product_id: int) -> Product | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products WHERE id = ?", (product_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_product(row)

    async def create_product(self, product: Product) -> Product:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "INSERT INTO products (name, sku, stock) VALUES (?, ?, ?)",
                (product.name, product.sku, product.stock),
            )
            product.id = cursor.lastrowid
            logger.info("product_created", product_id=product.id)
            return product

    async def increment_stock(self, product_id: int, quantity: int = 1) -> Product:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE products SET stock = stock + ? WHERE id = ?",
                (quantity, product_id),
            )
            if cursor.rowcount != 1:
                raise ProductNotFoundError(product_id)
            cursor = await conn.execute(
                "SELECT * FROM products WHERE id = ?", (product_id,)
            )
            row = await cursor.fetchone()
            logger.info(
                "product_stock_incremented",
                product_id=product_id,
                qty=quantity,
                stock=row["stock"],
            )
            return self._row_to_product(row)

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        return Product(
            id=row["id"],
            name=row["name"],
            sku=row["sku"],
            stock=row["stock"],
        )
