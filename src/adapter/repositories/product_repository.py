"""SQLAlchemy Product Repository Implementation

Stock lives on the product row; every mutation goes through a locked read.
"""

from typing import Optional
from datetime import datetime
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.product_repository import ProductRepository
from src.domain.product import Product


class SqlAlchemyProductRepository(ProductRepository):
    """
    SQLAlchemy implementation of ProductRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, product_id: int, for_update: bool = False) -> Optional[Product]:
        """
        Get product by ID

        Args:
            product_id: Product ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Product if found, None otherwise
        """
        stmt = select(Product).where(Product.id == product_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, product: Product) -> Product:
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def update(self, product: Product) -> Product:
        product.updated_at = datetime.utcnow()
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product
