"""Customer Repository Interface

Defines the contract for customer persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.customer import Customer


class CustomerRepository(ABC):
    """
    Repository interface for Customer persistence

    Balance changes must read the row with for_update=True.
    """

    @abstractmethod
    async def create(self, customer: Customer) -> Customer:
        """
        Create a new customer

        Args:
            customer: Customer entity to persist

        Returns:
            Created Customer with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, customer_id: int, for_update: bool = False) -> Optional[Customer]:
        """
        Retrieve customer by ID

        Args:
            customer_id: Customer ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Customer if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, customer: Customer) -> Customer:
        pass

    @abstractmethod
    async def delete(self, customer: Customer) -> None:
        pass

    @abstractmethod
    async def get_debtors(self, outlet_id: Optional[int] = None) -> List[Customer]:
        """
        Retrieve customers owing money, largest debt first

        Args:
            outlet_id: Optional filter by outlet

        Returns:
            Customers with current_debt > 0
        """
        pass
