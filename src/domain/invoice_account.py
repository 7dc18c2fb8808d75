"""Invoice account arithmetic

Pure functions that derive invoice totals, balance and status. Stock is
not touched here; callers reserve stock before pricing a new item set.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import List, Optional, Sequence
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.money import ZERO, is_settled, to_money


@dataclass(frozen=True)
class LineItem:
    """A priced line before it is persisted"""

    product_id: int
    unit_price: Decimal
    quantity: int
    title: str = ""

    @property
    def line_subtotal(self) -> Decimal:
        return to_money(to_money(self.unit_price) * self.quantity)


@dataclass(frozen=True)
class InvoiceTotals:
    """Money fields of an invoice"""

    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    total: Decimal
    amount_paid: Decimal
    balance: Decimal
    status: InvoiceStatus

    @classmethod
    def of(cls, invoice: Invoice) -> "InvoiceTotals":
        return cls(
            subtotal=to_money(invoice.subtotal),
            tax_rate=to_money(invoice.tax_rate),
            tax=to_money(invoice.tax),
            total=to_money(invoice.total),
            amount_paid=to_money(invoice.amount_paid),
            balance=to_money(invoice.balance),
            status=invoice.status,
        )

    def apply_to(self, invoice: Invoice) -> None:
        invoice.subtotal = self.subtotal
        invoice.tax_rate = self.tax_rate
        invoice.tax = self.tax
        invoice.total = self.total
        invoice.amount_paid = self.amount_paid
        invoice.balance = self.balance
        invoice.status = self.status


class InvoiceAccount:
    """Totals, balance and status rules of an invoice"""

    @staticmethod
    def derive_status(total: Decimal, amount_paid: Decimal, balance: Decimal) -> InvoiceStatus:
        if is_settled(balance):
            return InvoiceStatus.PAID
        if ZERO < amount_paid < total:
            return InvoiceStatus.PARTIAL
        return InvoiceStatus.UNPAID

    @staticmethod
    def subtotal_of(items: Sequence[LineItem]) -> Decimal:
        return to_money(sum((item.line_subtotal for item in items), ZERO))

    @classmethod
    def create(
        cls, items: Sequence[LineItem], amount_paid: Decimal, tax_rate: Decimal = ZERO
    ) -> InvoiceTotals:
        """Totals for a new invoice"""
        if not items:
            raise ValueError("An invoice needs at least one line item")

        tax_rate = to_money(tax_rate)
        amount_paid = to_money(amount_paid)
        subtotal = cls.subtotal_of(items)
        tax = to_money(subtotal * tax_rate / Decimal(100))
        total = subtotal + tax
        balance = total - amount_paid

        return InvoiceTotals(
            subtotal=subtotal,
            tax_rate=tax_rate,
            tax=tax,
            total=total,
            amount_paid=amount_paid,
            balance=balance,
            status=cls.derive_status(total, amount_paid, balance),
        )

    @classmethod
    def recompute(
        cls,
        totals: InvoiceTotals,
        new_items: Sequence[LineItem],
        new_amount_paid: Decimal,
        tax_rate: Optional[Decimal] = None,
    ) -> InvoiceTotals:
        """Totals from scratch for an edited item set (tax rate kept unless given)"""
        if tax_rate is None:
            tax_rate = totals.tax_rate
        return cls.create(new_items, new_amount_paid, tax_rate)

    @classmethod
    def apply_payment_delta(cls, totals: InvoiceTotals, delta: Decimal) -> InvoiceTotals:
        """Add (or with a negative delta, remove) a payment amount"""
        amount_paid = totals.amount_paid + to_money(delta)
        balance = totals.total - amount_paid
        return replace(
            totals,
            amount_paid=amount_paid,
            balance=balance,
            status=cls.derive_status(totals.total, amount_paid, balance),
        )


def line_items_of(lines) -> List[LineItem]:
    """LineItems for persisted InvoiceLine rows, in invoice order"""
    return [
        LineItem(
            product_id=line.product_id,
            unit_price=line.unit_price,
            quantity=line.quantity,
            title=line.title,
        )
        for line in sorted(lines, key=lambda line: line.position)
    ]
