"""CreateInvoice Use Case

Issues an invoice: reserves stock for every line, prices the invoice,
records the optional initial payment and moves the customer's debt or
credit, all in one transaction.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
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
from src.domain.invoice import Invoice
from src.domain.invoice_account import InvoiceAccount
from src.domain.invoice_line import InvoiceLine
from src.domain.money import ZERO, to_money
from src.domain.payment import Payment
from .dtos import CreateInvoiceCommandDTO, InvoiceResponseDTO
from .line_pricing import price_items

logger = logging.getLogger(__name__)


class CreateInvoice:
    """
    Use Case: Create an invoice

    Business Rules:
    1. At least one item; every product must exist and have the stock
    2. Tax rate: outlet rate when set, configured default otherwise
    3. A positive amount_paid is recorded as a linked payment
    4. Customer: underpayment becomes debt, overpayment becomes credit
    5. A customer with a credit limit cannot go above it
    6. Any failure leaves stock, invoice, payment and customer untouched

    Flow:
    1. Load outlet and customer (locked)
    2. Price items and reserve stock
    3. Compute totals, balance and status
    4. Create invoice, lines and initial payment
    5. Update customer and outlet totals
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
        due_days: int = 30,
        currency: str = "NGN",
    ):
        self.coordinator = TransactionCoordinator(uow)
        self.outlet_repo = outlet_repo
        self.customer_repo = customer_repo
        self.product_repo = product_repo
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.payment_repo = payment_repo
        self.stock_ledger = StockLedger(product_repo)
        self.notification_service = notification_service
        self.default_tax_rate = to_money(default_tax_rate)
        self.due_days = due_days
        self.currency = currency

    async def execute(self, command: CreateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice creation

        Args:
            command: CreateInvoiceCommandDTO with outlet, customer, items and amount paid

        Returns:
            Result[InvoiceResponseDTO]: Success with the invoice or error

        Errors:
            ITEMS_REQUIRED, OUTLET_NOT_FOUND, CUSTOMER_NOT_FOUND,
            PRODUCT_NOT_FOUND, INSUFFICIENT_STOCK, INVALID_QUANTITY,
            CREDIT_LIMIT_EXCEEDED, TRANSACTION_FAILED
        """
        result = await self.coordinator.run(
            lambda: self._create(command), operation="invoice creation"
        )

        if result.is_ok():
            invoice = result.value
            logger.info(
                f"Invoice {invoice.invoice_number} created for customer {invoice.customer_id}: "
                f"total={invoice.total}, paid={invoice.amount_paid}, status={invoice.status}"
            )
            await notify_after_commit(
                self.notification_service,
                "invoice.created",
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

    async def _create(self, command: CreateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        if not command.items:
            return Return.err(
                Error(
                    code=error_codes.ITEMS_REQUIRED,
                    message="At least one invoice item is required",
                )
            )

        # Step 1: Validate outlet and customer
        outlet = await self.outlet_repo.get_by_id(command.outlet_id, for_update=True)
        if not outlet:
            return Return.err(
                Error(
                    code=error_codes.OUTLET_NOT_FOUND,
                    message=f"Outlet {command.outlet_id} not found",
                )
            )

        customer = await self.customer_repo.get_by_id(command.customer_id, for_update=True)
        if not customer:
            return Return.err(
                Error(
                    code=error_codes.CUSTOMER_NOT_FOUND,
                    message=f"Customer {command.customer_id} not found",
                )
            )

        # Step 2: Price items and deduct stock
        priced = await price_items(self.product_repo, command.items)
        if priced.is_err():
            return priced
        items = priced.value

        reserved = await self.stock_ledger.reserve_items(items)
        if reserved.is_err():
            return reserved

        # Step 3: Totals, balance, status
        tax_rate = outlet.tax_rate if outlet.tax_rate is not None else self.default_tax_rate
        totals = InvoiceAccount.create(items, command.amount_paid, tax_rate)

        # Step 4: Customer debt / credit
        position = CustomerAccount.credit_or_debit(
            customer.position(), totals.total, totals.amount_paid
        )
        if customer.credit_limit > ZERO and position.current_debt > customer.credit_limit:
            return Return.err(
                Error(
                    code=error_codes.CREDIT_LIMIT_EXCEEDED,
                    message=f"Credit limit exceeded for customer {customer.id}",
                    reason=f"new_debt={position.current_debt}, credit_limit={customer.credit_limit}",
                )
            )

        # Step 5: Invoice and lines
        invoice_number = await self.invoice_repo.generate_invoice_number()
        issue_date = datetime.utcnow().date()
        invoice = Invoice(
            invoice_number=invoice_number,
            outlet_id=outlet.id,
            business_id=outlet.business_id,
            customer_id=customer.id,
            subtotal=totals.subtotal,
            tax_rate=totals.tax_rate,
            tax=totals.tax,
            total=totals.total,
            amount_paid=totals.amount_paid,
            balance=totals.balance,
            status=totals.status,
            currency=outlet.currency or self.currency,
            issue_date=issue_date,
            due_date=issue_date + timedelta(days=self.due_days),
            payment_terms=command.payment_terms,
            notes=command.notes,
            created_by=command.created_by,
        )
        invoice = await self.invoice_repo.create(invoice)

        lines = []
        for position_index, item in enumerate(items):
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

        # Step 6: Initial payment (its effect is already in the totals above)
        if totals.amount_paid > ZERO:
            await self.payment_repo.create(
                Payment(
                    invoice_id=invoice.id,
                    customer_id=customer.id,
                    amount=totals.amount_paid,
                    method=command.method,
                    reference=command.reference,
                    created_by=command.created_by,
                )
            )

        # Step 7: Customer and outlet totals
        customer.apply_position(position)
        customer.total_transactions += 1
        customer.last_purchase_at = datetime.utcnow()
        customer.average_purchase = to_money(customer.total_sales / customer.total_transactions)
        await self.customer_repo.update(customer)

        outlet.total_sales = to_money(outlet.total_sales) + totals.total
        await self.outlet_repo.update(outlet)

        return Return.ok(InvoiceResponseDTO.from_entity(invoice, lines))
