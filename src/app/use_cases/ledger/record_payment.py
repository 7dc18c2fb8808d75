"""RecordPayment Use Case

Records money received from a customer, optionally against an invoice.
The receipt image is uploaded only after the payment is committed.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.file_storage import FileStorage
from src.app.services.notification_service import NotificationService, notify_after_commit
from src.app.services.payment_ledger import PaymentLedger
from src.app.services.transaction_coordinator import TransactionCoordinator
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from .dtos import RecordPaymentCommandDTO, PaymentResponseDTO

logger = logging.getLogger(__name__)


class RecordPayment:
    """
    Use Case: Record a payment

    Business Rules:
    1. amount must be greater than 0
    2. Linked invoice: amount_paid += amount, balance and status re-derived
    3. Customer: debt is paid down first, any excess becomes credit
    4. Receipt upload happens after commit; a failed upload leaves the
       payment valid with receipt = None

    Flow:
    1. Transaction: create payment, apply to invoice and customer
    2. Upload receipt (if any)
    3. Second short transaction: store the receipt URL
    4. Notify
    """

    def __init__(
        self,
        uow: UnitOfWork,
        payment_repo: PaymentRepository,
        invoice_repo: InvoiceRepository,
        customer_repo: CustomerRepository,
        file_storage: Optional[FileStorage] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        self.coordinator = TransactionCoordinator(uow)
        self.payment_repo = payment_repo
        self.ledger = PaymentLedger(payment_repo, invoice_repo, customer_repo)
        self.file_storage = file_storage
        self.notification_service = notification_service

    async def execute(
        self,
        command: RecordPaymentCommandDTO,
        receipt: Optional[bytes] = None,
        receipt_filename: Optional[str] = None,
        receipt_content_type: Optional[str] = None,
    ) -> Result[PaymentResponseDTO]:
        """
        Execute payment recording

        Args:
            command: RecordPaymentCommandDTO with customer, amount, method, invoice
            receipt: Raw receipt image, uploaded after commit
            receipt_filename: Original file name of the receipt
            receipt_content_type: MIME type of the receipt

        Returns:
            Result[PaymentResponseDTO]: Recorded payment or error

        Errors:
            INVALID_AMOUNT, CUSTOMER_NOT_FOUND, INVOICE_NOT_FOUND,
            INVOICE_CUSTOMER_MISMATCH, TRANSACTION_FAILED
        """
        result = await self.coordinator.run(
            lambda: self._record(command), operation="payment recording"
        )
        if result.is_err():
            return result

        payment = result.value
        logger.info(
            f"Payment {payment.payment_id} recorded: customer={payment.customer_id}, "
            f"invoice={payment.invoice_id}, amount={payment.amount}, method={payment.method}"
        )

        if receipt:
            payment = await self._attach_receipt(
                payment, receipt, receipt_filename, receipt_content_type
            )

        await notify_after_commit(
            self.notification_service,
            "payment.recorded",
            {
                "payment_id": payment.payment_id,
                "customer_id": payment.customer_id,
                "invoice_id": payment.invoice_id,
                "amount": str(payment.amount),
                "method": payment.method,
            },
        )
        return Return.ok(payment)

    async def _record(self, command: RecordPaymentCommandDTO) -> Result[PaymentResponseDTO]:
        recorded = await self.ledger.record(
            customer_id=command.customer_id,
            amount=command.amount,
            method=command.method,
            invoice_id=command.invoice_id,
            reference=command.reference,
            created_by=command.created_by,
        )
        if recorded.is_err():
            return recorded
        return Return.ok(PaymentResponseDTO.from_entity(recorded.value))

    async def _attach_receipt(
        self,
        payment: PaymentResponseDTO,
        content: bytes,
        filename: Optional[str],
        content_type: Optional[str],
    ) -> PaymentResponseDTO:
        if self.file_storage is None:
            logger.warning(f"No file storage configured, receipt of payment {payment.payment_id} dropped")
            return payment

        try:
            url = await self.file_storage.store_file(content, filename, content_type)
        except Exception as e:
            logger.error(f"Receipt upload for payment {payment.payment_id} failed: {e}")
            return payment

        stored = await self.coordinator.run(
            lambda: self._store_receipt_url(payment.payment_id, url),
            operation="receipt attachment",
        )
        if stored.is_err():
            logger.error(
                f"Could not save receipt URL for payment {payment.payment_id}: {stored.error.message}"
            )
            return payment
        return stored.value

    async def _store_receipt_url(self, payment_id: int, url: str) -> Result[PaymentResponseDTO]:
        payment = await self.payment_repo.get_by_id(payment_id, for_update=True)
        if not payment:
            return Return.err(
                Error(
                    code=error_codes.PAYMENT_NOT_FOUND,
                    message=f"Payment {payment_id} not found",
                )
            )
        payment.receipt = url
        return Return.ok(PaymentResponseDTO.from_entity(await self.payment_repo.update(payment)))
