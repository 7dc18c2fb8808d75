"""
List Payments Use Case

Retrieves payments of a customer and/or invoice with pagination.
"""
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.payment_repository import PaymentRepository
from .dtos import ListPaymentsResponseDTO, PaymentResponseDTO


class ListPayments:
    """
    Use case: List payments

    Payments are ordered by created_at DESC (most recent first).
    """

    def __init__(self, payment_repo: PaymentRepository):
        self.payment_repo = payment_repo

    async def execute(
        self,
        customer_id: Optional[int] = None,
        invoice_id: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Result[ListPaymentsResponseDTO]:
        payments, total = await self.payment_repo.list(
            customer_id=customer_id,
            invoice_id=invoice_id,
            limit=limit,
            offset=offset,
        )

        return Return.ok(
            ListPaymentsResponseDTO(
                payments=[PaymentResponseDTO.from_entity(payment) for payment in payments],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
