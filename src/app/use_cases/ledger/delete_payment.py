"""DeletePayment Use Case

Reverses a recent payment and removes it.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.notification_service import NotificationService, notify_after_commit
from src.app.services.payment_ledger import PaymentLedger, DEFAULT_DELETE_WINDOW
from src.app.services.transaction_coordinator import TransactionCoordinator
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from .dtos import DeletedResponseDTO

logger = logging.getLogger(__name__)


class DeletePayment:
    """
    Use Case: Delete a payment

    Business Rules:
    1. Only payments younger than the delete window (7 days) can go
    2. The payment's effect on customer and invoice is rolled back
    3. The row is removed; there is no voided state
    """

    def __init__(
        self,
        uow: UnitOfWork,
        payment_repo: PaymentRepository,
        invoice_repo: InvoiceRepository,
        customer_repo: CustomerRepository,
        delete_window: timedelta = DEFAULT_DELETE_WINDOW,
        notification_service: Optional[NotificationService] = None,
    ):
        self.coordinator = TransactionCoordinator(uow)
        self.payment_repo = payment_repo
        self.ledger = PaymentLedger(
            payment_repo, invoice_repo, customer_repo, delete_window=delete_window
        )
        self.notification_service = notification_service

    async def execute(
        self, payment_id: int, now: Optional[datetime] = None
    ) -> Result[DeletedResponseDTO]:
        """
        Execute payment deletion

        Args:
            payment_id: Payment to delete
            now: Reference time for the delete window (defaults to utcnow)

        Errors:
            PAYMENT_NOT_FOUND, OUTSIDE_DELETE_WINDOW, TRANSACTION_FAILED
        """
        result = await self.coordinator.run(
            lambda: self._delete(payment_id, now), operation="payment deletion"
        )
        if result.is_ok():
            logger.info(f"Payment {payment_id} deleted")
            await notify_after_commit(
                self.notification_service, "payment.deleted", {"payment_id": payment_id}
            )
        return result

    async def _delete(self, payment_id: int, now: Optional[datetime]) -> Result[DeletedResponseDTO]:
        payment = await self.payment_repo.get_by_id(payment_id, for_update=True)
        if not payment:
            return Return.err(
                Error(
                    code=error_codes.PAYMENT_NOT_FOUND,
                    message=f"Payment {payment_id} not found",
                )
            )

        deleted = await self.ledger.delete(payment, now=now)
        if deleted.is_err():
            return deleted
        return Return.ok(DeletedResponseDTO(id=payment_id))
