"""Payment Ledger

Owns payment rows and the effect each one has on its invoice and its
customer. Edits and deletions undo the committed effect before anything
new is applied.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.customer import Customer
from src.domain.customer_account import CustomerAccount
from src.domain.invoice import Invoice
from src.domain.invoice_account import InvoiceAccount, InvoiceTotals
from src.domain.money import ZERO, to_money
from src.domain.payment import Payment, PaymentMethod

logger = logging.getLogger(__name__)

DEFAULT_DELETE_WINDOW = timedelta(days=7)


class PaymentLedger:
    """
    Record / edit / delete payments with their side effects

    State machine: created -> (edited)* -> deleted | permanent.
    Deletion, and the shrinking done by an invoice edit that lowers its
    amount paid, are limited to the delete window.

    All methods stage changes in the caller's unit of work and return an
    error Result before the first write whenever a lookup or validation
    fails.
    """

    def __init__(
        self,
        payment_repo: PaymentRepository,
        invoice_repo: InvoiceRepository,
        customer_repo: CustomerRepository,
        delete_window: timedelta = DEFAULT_DELETE_WINDOW,
    ):
        self.payment_repo = payment_repo
        self.invoice_repo = invoice_repo
        self.customer_repo = customer_repo
        self.delete_window = delete_window

    async def record(
        self,
        customer_id: int,
        amount: Decimal,
        method: PaymentMethod,
        invoice_id: Optional[int] = None,
        reference: Optional[str] = None,
        created_by: Optional[str] = None,
        receipt: Optional[str] = None,
    ) -> Result[Payment]:
        """
        Create a payment and apply it

        Errors:
            INVALID_AMOUNT, CUSTOMER_NOT_FOUND, INVOICE_NOT_FOUND,
            INVOICE_CUSTOMER_MISMATCH
        """
        invalid = self._validate_amount(amount)
        if invalid:
            return invalid
        amount = to_money(amount)

        customer = await self.customer_repo.get_by_id(customer_id, for_update=True)
        if not customer:
            return self._customer_not_found(customer_id)

        invoice = None
        if invoice_id is not None:
            invoice = await self.invoice_repo.get_by_id(invoice_id, for_update=True)
            if not invoice:
                return self._invoice_not_found(invoice_id)
            mismatch = self._check_owner(invoice, customer_id)
            if mismatch:
                return mismatch

        payment = await self.payment_repo.create(
            Payment(
                invoice_id=invoice_id,
                customer_id=customer_id,
                amount=amount,
                method=method,
                reference=reference,
                receipt=receipt,
                created_by=created_by,
            )
        )

        if invoice is not None:
            await self._apply_to_invoice(invoice, amount)
        await self._apply_to_customer(customer, amount)

        return Return.ok(payment)

    async def edit(
        self,
        payment: Payment,
        new_amount: Decimal,
        new_method: PaymentMethod,
        new_invoice_id: Optional[int],
        new_reference: Optional[str] = None,
    ) -> Result[Payment]:
        """
        Roll back the payment's effect and reapply it with new values

        Order: customer rollback, old invoice rollback, customer apply,
        new invoice apply, then the row itself.

        Errors:
            INVALID_AMOUNT, CUSTOMER_NOT_FOUND, INVOICE_NOT_FOUND,
            INVOICE_CUSTOMER_MISMATCH
        """
        invalid = self._validate_amount(new_amount)
        if invalid:
            return invalid
        new_amount = to_money(new_amount)
        old_amount = to_money(payment.amount)

        customer = await self.customer_repo.get_by_id(payment.customer_id, for_update=True)
        if not customer:
            return self._customer_not_found(payment.customer_id)

        old_invoice = None
        if payment.invoice_id is not None:
            old_invoice = await self.invoice_repo.get_by_id(payment.invoice_id, for_update=True)

        new_invoice = None
        if new_invoice_id is not None:
            new_invoice = await self.invoice_repo.get_by_id(new_invoice_id, for_update=True)
            if not new_invoice:
                return self._invoice_not_found(new_invoice_id)
            mismatch = self._check_owner(new_invoice, payment.customer_id)
            if mismatch:
                return mismatch

        await self._rollback_from_customer(customer, old_amount)
        if old_invoice is not None:
            await self._apply_to_invoice(old_invoice, -old_amount)

        await self._apply_to_customer(customer, new_amount)
        if new_invoice is not None:
            await self._apply_to_invoice(new_invoice, new_amount)

        payment.amount = new_amount
        payment.method = new_method
        payment.invoice_id = new_invoice_id
        if new_reference is not None:
            payment.reference = new_reference
        updated = await self.payment_repo.update(payment)

        logger.info(
            f"Payment {payment.id} edited: amount {old_amount} -> {new_amount}, "
            f"invoice {old_invoice.id if old_invoice else None} -> {new_invoice_id}"
        )
        return Return.ok(updated)

    async def delete(self, payment: Payment, now: Optional[datetime] = None) -> Result[None]:
        """
        Roll back the payment's effect and remove the row

        Errors:
            OUTSIDE_DELETE_WINDOW, CUSTOMER_NOT_FOUND
        """
        expired = self._check_window(payment, now or datetime.utcnow())
        if expired:
            return expired

        customer = await self.customer_repo.get_by_id(payment.customer_id, for_update=True)
        if not customer:
            return self._customer_not_found(payment.customer_id)

        amount = to_money(payment.amount)
        await self._rollback_from_customer(customer, amount)
        if payment.invoice_id is not None:
            invoice = await self.invoice_repo.get_by_id(payment.invoice_id, for_update=True)
            if invoice is not None:
                await self._apply_to_invoice(invoice, -amount)

        await self.payment_repo.delete(payment)
        return Return.ok(None)

    async def withdraw_from_invoice(
        self,
        invoice: Invoice,
        customer: Customer,
        amount: Decimal,
        now: Optional[datetime] = None,
    ) -> Result[Decimal]:
        """
        Take `amount` back out of an invoice's payments, newest first

        Each payment touched is shrunk, or removed once nothing is left of
        it, and only that share is rolled back from the invoice and the
        customer. Every touched payment must still be inside the delete
        window; nothing is written otherwise.

        Returns:
            Result[Decimal]: the part of `amount` no linked payment covered

        Errors:
            OUTSIDE_DELETE_WINDOW
        """
        now = now or datetime.utcnow()
        remaining = to_money(amount)

        shares = []
        for payment in await self.payment_repo.get_by_invoice_id(invoice.id, for_update=True):
            if remaining <= ZERO:
                break
            expired = self._check_window(payment, now)
            if expired:
                return expired
            share = min(to_money(payment.amount), remaining)
            shares.append((payment, share))
            remaining -= share

        for payment, share in shares:
            await self._rollback_from_customer(customer, share)
            await self._apply_to_invoice(invoice, -share)
            left = to_money(payment.amount) - share
            if left > ZERO:
                payment.amount = left
                await self.payment_repo.update(payment)
            else:
                await self.payment_repo.delete(payment)
            logger.info(f"Payment {payment.id} reduced by {share} for invoice {invoice.id}")

        return Return.ok(remaining)

    async def _apply_to_invoice(self, invoice: Invoice, delta: Decimal) -> None:
        totals = InvoiceAccount.apply_payment_delta(InvoiceTotals.of(invoice), delta)
        totals.apply_to(invoice)
        await self.invoice_repo.update(invoice)

    async def _apply_to_customer(self, customer: Customer, amount: Decimal) -> None:
        customer.apply_position(CustomerAccount.apply_payment(customer.position(), amount))
        await self.customer_repo.update(customer)

    async def _rollback_from_customer(self, customer: Customer, amount: Decimal) -> None:
        customer.apply_position(CustomerAccount.rollback_payment(customer.position(), amount))
        await self.customer_repo.update(customer)

    @staticmethod
    def _validate_amount(amount: Optional[Decimal]) -> Optional[Result]:
        if amount is None or to_money(amount) <= ZERO:
            return Return.err(
                Error(
                    code=error_codes.INVALID_AMOUNT,
                    message="Payment amount must be greater than 0",
                    reason=f"amount={amount}",
                )
            )
        return None

    def _check_window(self, payment: Payment, now: datetime) -> Optional[Result]:
        age = now - payment.created_at
        if age > self.delete_window:
            return Return.err(
                Error(
                    code=error_codes.OUTSIDE_DELETE_WINDOW,
                    message=f"Payment {payment.id} can no longer be deleted",
                    reason=f"created_at={payment.created_at.isoformat()}, age={age}, window={self.delete_window}",
                )
            )
        return None

    @staticmethod
    def _check_owner(invoice: Invoice, customer_id: int) -> Optional[Result]:
        # A payment may only settle the paying customer's own invoice
        if invoice.customer_id != customer_id:
            return Return.err(
                Error(
                    code=error_codes.INVOICE_CUSTOMER_MISMATCH,
                    message=f"Invoice {invoice.id} does not belong to customer {customer_id}",
                    reason=f"invoice_customer_id={invoice.customer_id}",
                )
            )
        return None

    @staticmethod
    def _customer_not_found(customer_id: int) -> Result:
        return Return.err(
            Error(
                code=error_codes.CUSTOMER_NOT_FOUND,
                message=f"Customer {customer_id} not found",
            )
        )

    @staticmethod
    def _invoice_not_found(invoice_id: int) -> Result:
        return Return.err(
            Error(
                code=error_codes.INVOICE_NOT_FOUND,
                message=f"Invoice {invoice_id} not found",
            )
        )
