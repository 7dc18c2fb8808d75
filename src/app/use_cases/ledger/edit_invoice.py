"""EditInvoice Use Case

Replaces an invoice's item set and amount paid. Every prior effect
(stock, totals, customer position) is corrected by delta, never
overwritten.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.notification_service import NotificationService, notify_after_commit
from src.app.services.payment_ledger import DEFAULT_DELETE_WINDOW, PaymentLedger
from src.app.services.stock_ledger import StockLedger
from src.app.services.transaction_coordinator import TransactionCoordinator
from src.app.repositories.outlet_repository import OutletRepository
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.product_repository import ProductRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.customer_account import CustomerAccount
from src.domain.invoice_account import InvoiceAccount, InvoiceTotals, line_items_of
from src.domain.invoice_line import InvoiceLine
from src.domain.money import ZERO, to_money
from src.domain.payment import Payment
from .dtos import (
    EditInvoiceCommandDTO,
    EditInvoiceResponseDTO,
    InvoiceResponseDTO,
    PaymentResponseDTO,
)
from .line_pricing import price_items

logger = logging.getLogger(__name__)


class EditInvoice:
    """
    Use Case: Edit an invoice's items and amount paid

    Business Rules:
    1. Old lines release their stock before new lines reserve any
    2. Totals, balance and status are recomputed from scratch
    3. Customer moves by the total delta (charge / refund) and by the
       amount_paid delta (payment / rollback)
    4. A positive amount_paid delta is recorded as a new linked payment;
       a negative one shrinks or removes the linked payments, newest first,
       so their sum keeps matching amount_paid
    5. A customer with a credit limit cannot be pushed above it

    Flow:
    1. Load invoice, outlet and customer (locked)
    2. Price new items, release old stock, reserve new stock
    3. Recompute totals and replace the lines
    4. Correct customer and outlet by delta
    5. Record or withdraw the payment difference
    6. Commit, then notify
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
        default_tax_rate: Decimal = ZERO,
        delete_window: timedelta = DEFAULT_DELETE_WINDOW,
    ):
        self.coordinator = TransactionCoordinator(uow)
        self.outlet_repo = outlet_repo
        self.customer_repo = customer_repo
        self.product_repo = product_repo
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.payment_repo = payment_repo
        self.stock_ledger = StockLedger(product_repo)
        self.payment_ledger = PaymentLedger(
            payment_repo, invoice_repo, customer_repo, delete_window=delete_window
        )
        self.notification_service = notification_service
        self.default_tax_rate = to_money(default_tax_rate)

    async def execute(self, command: EditInvoiceCommandDTO) -> Result[EditInvoiceResponseDTO]:
        """
        Execute invoice edit

        Args:
            command: EditInvoiceCommandDTO with the new items and amount paid

        Returns:
            Result[EditInvoiceResponseDTO]: Edited invoice and the payment
            created for an increased amount_paid, or error

        Errors:
            INVOICE_NOT_FOUND, ITEMS_REQUIRED, PRODUCT_NOT_FOUND,
            INSUFFICIENT_STOCK, INVALID_QUANTITY, CUSTOMER_NOT_FOUND,
            CREDIT_LIMIT_EXCEEDED, OUTSIDE_DELETE_WINDOW, TRANSACTION_FAILED
        """
        result = await self.coordinator.run(
            lambda: self._edit(command), operation="invoice edit"
        )

        if result.is_ok():
            invoice = result.value.invoice
            logger.info(
                f"Invoice {invoice.invoice_number} edited: total={invoice.total}, "
                f"paid={invoice.amount_paid}, status={invoice.status}"
            )
            await notify_after_commit(
                self.notification_service,
                "invoice.updated",
                {
                    "invoice_id": invoice.invoice_id,
                    "invoice_number": invoice.invoice_number,
                    "customer_id": invoice.customer_id,
                    "total": str(invoice.total),
                    "amount_paid": str(invoice.amount_paid),
                    "status": invoice.status,
                },
            )
        return result

    async def _edit(self, command: EditInvoiceCommandDTO) -> Result[EditInvoiceResponseDTO]:
        # Step 1: Load invoice, outlet, customer
        invoice = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)
        if not invoice:
            return Return.err(
                Error(
                    code=error_codes.INVOICE_NOT_FOUND,
                    message=f"Invoice {command.invoice_id} not found",
                )
            )

        outlet = await self.outlet_repo.get_by_id(invoice.outlet_id, for_update=True)
        if not outlet:
            return Return.err(
                Error(
                    code=error_codes.OUTLET_NOT_FOUND,
                    message=f"Outlet {invoice.outlet_id} not found",
                )
            )

        customer = await self.customer_repo.get_by_id(invoice.customer_id, for_update=True)
        if not customer:
            return Return.err(
                Error(
                    code=error_codes.CUSTOMER_NOT_FOUND,
                    message=f"Customer {invoice.customer_id} not found",
                )
            )

        # Step 2: Stock - release every old line, then reserve the new set
        priced = await price_items(self.product_repo, command.items)
        if priced.is_err():
            return priced
        new_items = priced.value

        old_lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
        replaced = await self.stock_ledger.replace_items(line_items_of(old_lines), new_items)
        if replaced.is_err():
            return replaced

        # Step 3: Totals from scratch
        old_totals = InvoiceTotals.of(invoice)
        tax_rate = outlet.tax_rate if outlet.tax_rate is not None else self.default_tax_rate
        new_totals = InvoiceAccount.recompute(old_totals, new_items, command.amount_paid, tax_rate)
        total_delta = new_totals.total - old_totals.total
        paid_delta = new_totals.amount_paid - old_totals.amount_paid

        # Step 4: Customer by delta
        old_debt = to_money(customer.current_debt)
        position = CustomerAccount.adjust_for_invoice_edit(
            customer.position(), total_delta, paid_delta
        )
        if (
            customer.credit_limit > ZERO
            and position.current_debt > old_debt
            and position.current_debt > customer.credit_limit
        ):
            return Return.err(
                Error(
                    code=error_codes.CREDIT_LIMIT_EXCEEDED,
                    message=f"Credit limit exceeded for customer {customer.id}",
                    reason=f"new_debt={position.current_debt}, credit_limit={customer.credit_limit}",
                )
            )
        # A lower amount paid is rolled back per payment in step 6
        customer.apply_position(
            CustomerAccount.adjust_for_invoice_edit(
                customer.position(), total_delta, max(paid_delta, ZERO)
            )
        )
        await self.customer_repo.update(customer)

        # Step 5: Replace lines, save invoice
        await self.invoice_line_repo.delete_by_invoice_id(invoice.id)
        lines = []
        for position_index, item in enumerate(new_items):
            line = await self.invoice_line_repo.create(
                InvoiceLine(
                    invoice_id=invoice.id,
                    position=position_index,
                    product_id=item.product_id,
                    title=item.title,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    line_subtotal=item.line_subtotal,
                )
            )
            lines.append(line)

        if paid_delta < ZERO:
            # Keep the old amount paid until its payments are withdrawn
            InvoiceAccount.apply_payment_delta(new_totals, -paid_delta).apply_to(invoice)
        else:
            new_totals.apply_to(invoice)
        invoice.updated_at = datetime.utcnow()
        invoice = await self.invoice_repo.update(invoice)

        if total_delta != ZERO:
            outlet.total_sales = to_money(outlet.total_sales) + total_delta
            await self.outlet_repo.update(outlet)

        # Step 6: Payment for the difference
        payment = None
        if paid_delta > ZERO:
            payment = await self.payment_repo.create(
                Payment(
                    invoice_id=invoice.id,
                    customer_id=customer.id,
                    amount=paid_delta,
                    method=command.method,
                    reference=command.reference,
                    created_by=command.created_by,
                )
            )
        elif paid_delta < ZERO:
            withdrawn = await self.payment_ledger.withdraw_from_invoice(
                invoice, customer, -paid_delta
            )
            if withdrawn.is_err():
                return withdrawn
            uncovered = withdrawn.value
            if uncovered > ZERO:
                # Amount paid with no payment row behind it
                customer.apply_position(
                    CustomerAccount.rollback_payment(customer.position(), uncovered)
                )
                await self.customer_repo.update(customer)
                InvoiceAccount.apply_payment_delta(InvoiceTotals.of(invoice), -uncovered).apply_to(invoice)
                invoice = await self.invoice_repo.update(invoice)

        return Return.ok(
            EditInvoiceResponseDTO(
                invoice=InvoiceResponseDTO.from_entity(invoice, lines),
                payment=PaymentResponseDTO.from_entity(payment) if payment else None,
            )
        )
