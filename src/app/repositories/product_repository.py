"""Product Repository Interface

Defines the contract for product persistence operations used by the
stock ledger.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.product import Product


class ProductRepository(ABC):
    """
    Repository interface for Product persistence

    Stock changes must read the row with for_update=True so concurrent
    reservations of the same product are serialized by the database.
    """

    @abstractmethod
    async def get_by_id(self, product_id: int, for_update: bool = False) -> Optional[Product]:
        """
        Retrieve product by ID

        Args:
            product_id: Product ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Product if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, product: Product) -> Product:
        pass

    @abstractmethod
    async def update(self, product: Product) -> Product:
        """
        Persist changed stock / status

        Args:
            product: Product with updated values

        Returns:
            Updated Product
        """
        pass
