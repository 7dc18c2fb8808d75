"""SQLAlchemy Customer Repository Implementation

Implements customer persistence using SQLAlchemy async session.
"""

from typing import List, Optional
from datetime import datetime
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.customer_repository import CustomerRepository
from src.domain.customer import Customer


class SqlAlchemyCustomerRepository(CustomerRepository):
    """
    SQLAlchemy implementation of CustomerRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, customer: Customer) -> Customer:
        """
        Create a new customer

        Args:
            customer: Customer entity to persist

        Returns:
            Created Customer with generated ID
        """
        self.session.add(customer)
        await self.session.flush()
        await self.session.refresh(customer)
        return customer

    async def get_by_id(self, customer_id: int, for_update: bool = False) -> Optional[Customer]:
        """
        Get customer by ID

        Args:
            customer_id: Customer ID
            for_update: If True, locks the row with SELECT FOR UPDATE (prevents concurrent modifications)

        Returns:
            Customer if found, None otherwise
        """
        stmt = select(Customer).where(Customer.id == customer_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, customer: Customer) -> Customer:
        """
        Update customer

        Args:
            customer: Customer entity with updated values

        Returns:
            Updated Customer
        """
        customer.updated_at = datetime.utcnow()
        self.session.add(customer)
        await self.session.flush()
        await self.session.refresh(customer)
        return customer

    async def delete(self, customer: Customer) -> None:
        await self.session.delete(customer)
        await self.session.flush()

    async def get_debtors(self, outlet_id: Optional[int] = None) -> List[Customer]:
        stmt = select(Customer).where(Customer.current_debt > 0)
        if outlet_id is not None:
            stmt = stmt.where(Customer.outlet_id == outlet_id)
        stmt = stmt.order_by(Customer.current_debt.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
