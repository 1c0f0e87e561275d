"""Finished-goods product, as far as the ledger needs to see it."""

from pydantic import BaseModel


class Product(BaseModel):
    """Catalog product owned by the storefront; only stock is touched here."""

    id: int | None = None
    name: str
    sku: str | None = None
    stock: int = 0
