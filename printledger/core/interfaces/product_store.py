"""Port into the storefront product catalog."""

from abc import ABC, abstractmethod

from printledger.core.entities.product import Product


class IProductStore(ABC):
    """Only finished-goods stock is written through this port."""

    @abstractmethod
    async def get_product(self, product_id: int) -> Product | None:
        """Get product by ID."""

    @abstractmethod
    async def create_product(self, product: Product) -> Product:
        """Register a product."""

    @abstractmethod
    async def increment_stock(self, product_id: int, quantity: int = 1) -> Product:
        """Add produced units to a product's stock."""
