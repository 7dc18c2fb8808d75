"""Payment Repository Interface

Defines the contract for payment persistence operations.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from src.domain.payment import Payment


class PaymentRepository(ABC):
    """Repository interface for Payment persistence"""

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        """
        Create a new payment

        Args:
            payment: Payment entity to persist

        Returns:
            Created Payment with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, payment_id: int, for_update: bool = False) -> Optional[Payment]:
        """
        Retrieve payment by ID

        Args:
            payment_id: Payment ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Payment if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int, for_update: bool = False) -> List[Payment]:
        """
        Payments linked to an invoice, newest first

        Args:
            invoice_id: Invoice ID
            for_update: If True, lock the rows with SELECT FOR UPDATE
        """
        pass

    @abstractmethod
    async def update(self, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def delete(self, payment: Payment) -> None:
        pass

    @abstractmethod
    async def exists_for_invoice(self, invoice_id: int) -> bool:
        """
        Check if any payment references the invoice

        Used to guard invoice deletion.
        """
        pass

    @abstractmethod
    async def list(
        self,
        customer_id: Optional[int] = None,
        invoice_id: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Payment], int]:
        """
        Retrieve payments, newest first

        Returns:
            Tuple of (payments, total count)
        """
        pass

    @abstractmethod
    async def get_sums_by_invoice(self) -> Dict[int, Decimal]:
        """
        Sum of linked payment amounts per invoice

        Returns:
            Mapping of invoice_id to the sum of its payments
        """
        pass
