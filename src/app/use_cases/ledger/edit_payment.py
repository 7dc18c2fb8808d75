"""EditPayment Use Case

Changes a payment's amount, method or invoice by rolling back its
committed effect and applying the new one.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.notification_service import NotificationService, notify_after_commit
from src.app.services.payment_ledger import PaymentLedger
from src.app.services.transaction_coordinator import TransactionCoordinator
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from .dtos import EditPaymentCommandDTO, PaymentResponseDTO

logger = logging.getLogger(__name__)


class EditPayment:
    """
    Use Case: Edit a payment

    Business Rules:
    1. amount must be greater than 0
    2. The old effect is rolled back (customer, then old invoice) before
       the new one is applied (customer, then new invoice)
    3. invoice_id left out keeps the current link; null unlinks
    """

    def __init__(
        self,
        uow: UnitOfWork,
        payment_repo: PaymentRepository,
        invoice_repo: InvoiceRepository,
        customer_repo: CustomerRepository,
        notification_service: Optional[NotificationService] = None,
    ):
        self.coordinator = TransactionCoordinator(uow)
        self.payment_repo = payment_repo
        self.ledger = PaymentLedger(payment_repo, invoice_repo, customer_repo)
        self.notification_service = notification_service

    async def execute(self, command: EditPaymentCommandDTO) -> Result[PaymentResponseDTO]:
        """
        Execute payment edit

        Errors:
            PAYMENT_NOT_FOUND, INVALID_AMOUNT, CUSTOMER_NOT_FOUND,
            INVOICE_NOT_FOUND, INVOICE_CUSTOMER_MISMATCH, TRANSACTION_FAILED
        """
        result = await self.coordinator.run(
            lambda: self._edit(command), operation="payment edit"
        )
        if result.is_ok():
            payment = result.value
            await notify_after_commit(
                self.notification_service,
                "payment.updated",
                {
                    "payment_id": payment.payment_id,
                    "customer_id": payment.customer_id,
                    "invoice_id": payment.invoice_id,
                    "amount": str(payment.amount),
                    "method": payment.method,
                },
            )
        return result

    async def _edit(self, command: EditPaymentCommandDTO) -> Result[PaymentResponseDTO]:
        payment = await self.payment_repo.get_by_id(command.payment_id, for_update=True)
        if not payment:
            return Return.err(
                Error(
                    code=error_codes.PAYMENT_NOT_FOUND,
                    message=f"Payment {command.payment_id} not found",
                )
            )

        invoice_id = payment.invoice_id if command.keeps_invoice_link() else command.invoice_id
        edited = await self.ledger.edit(
            payment,
            new_amount=command.amount,
            new_method=command.method,
            new_invoice_id=invoice_id,
            new_reference=command.reference,
        )
        if edited.is_err():
            return edited
        return Return.ok(PaymentResponseDTO.from_entity(edited.value))
