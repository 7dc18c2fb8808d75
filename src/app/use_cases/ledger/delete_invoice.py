"""DeleteInvoice Use Case

Removes an invoice nobody has paid against yet, giving its stock back.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.notification_service import NotificationService, notify_after_commit
from src.app.services.stock_ledger import StockLedger
from src.app.services.transaction_coordinator import TransactionCoordinator
from src.app.repositories.outlet_repository import OutletRepository
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.product_repository import ProductRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.customer_account import CustomerAccount
from src.domain.invoice_account import line_items_of
from src.domain.money import ZERO, to_money
from .dtos import DeletedResponseDTO

logger = logging.getLogger(__name__)


class DeleteInvoice:
    """
    Use Case: Delete an invoice

    Business Rules:
    1. An invoice referenced by any payment cannot be deleted
    2. Stock of every line is released
    3. Customer: reverseInvoiceDeletion(amount_paid, total)
    4. Outlet total_sales drops by the invoice total
    """

    def __init__(
        self,
        uow: UnitOfWork,
        outlet_repo: OutletRepository,
        customer_repo: CustomerRepository,
        product_repo: ProductRepository,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        payment_repo: PaymentRepository,
        notification_service: Optional[NotificationService] = None,
    ):
        self.coordinator = TransactionCoordinator(uow)
        self.outlet_repo = outlet_repo
        self.customer_repo = customer_repo
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.payment_repo = payment_repo
        self.stock_ledger = StockLedger(product_repo)
        self.notification_service = notification_service

    async def execute(self, invoice_id: int) -> Result[DeletedResponseDTO]:
        """
        Execute invoice deletion

        Errors:
            INVOICE_NOT_FOUND, HAS_EXISTING_PAYMENT, TRANSACTION_FAILED
        """
        result = await self.coordinator.run(
            lambda: self._delete(invoice_id), operation="invoice deletion"
        )
        if result.is_ok():
            logger.info(f"Invoice {invoice_id} deleted")
            await notify_after_commit(
                self.notification_service, "invoice.deleted", {"invoice_id": invoice_id}
            )
        return result

    async def _delete(self, invoice_id: int) -> Result[DeletedResponseDTO]:
        invoice = await self.invoice_repo.get_by_id(invoice_id, for_update=True)
        if not invoice:
            return Return.err(
                Error(
                    code=error_codes.INVOICE_NOT_FOUND,
                    message=f"Invoice {invoice_id} not found",
                )
            )

        if await self.payment_repo.exists_for_invoice(invoice.id):
            return Return.err(
                Error(
                    code=error_codes.HAS_EXISTING_PAYMENT,
                    message=f"Invoice {invoice.invoice_number} has payments and cannot be deleted",
                    reason=f"invoice_id={invoice.id}",
                )
            )

        lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
        released = await self.stock_ledger.release_items(line_items_of(lines))
        if released.is_err():
            return released

        customer = await self.customer_repo.get_by_id(invoice.customer_id, for_update=True)
        if customer:
            customer.apply_position(
                CustomerAccount.reverse_invoice_deletion(
                    customer.position(), invoice.amount_paid, invoice.total
                )
            )
            customer.total_transactions = max(customer.total_transactions - 1, 0)
            customer.average_purchase = (
                to_money(customer.total_sales / customer.total_transactions)
                if customer.total_transactions
                else ZERO
            )
            await self.customer_repo.update(customer)

        outlet = await self.outlet_repo.get_by_id(invoice.outlet_id, for_update=True)
        if outlet:
            outlet.total_sales = to_money(outlet.total_sales) - to_money(invoice.total)
            await self.outlet_repo.update(outlet)

        await self.invoice_line_repo.delete_by_invoice_id(invoice.id)
        await self.invoice_repo.delete(invoice)
        return Return.ok(DeletedResponseDTO(id=invoice_id))
