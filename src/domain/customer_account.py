"""Customer account arithmetic

Pure functions of (position, amount) -> new position. They never touch
storage; use cases load a Customer, compute here and write the result back.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from src.domain.money import ZERO, to_money


@dataclass(frozen=True)
class CustomerPosition:
    """Ledger-relevant fields of a customer"""

    total_sales: Decimal = ZERO
    current_debt: Decimal = ZERO
    credit_balance: Decimal = ZERO

    def __post_init__(self):
        object.__setattr__(self, "total_sales", to_money(self.total_sales))
        object.__setattr__(self, "current_debt", to_money(self.current_debt))
        object.__setattr__(self, "credit_balance", to_money(self.credit_balance))


class CustomerAccount:
    """
    Debt / credit rules of a customer

    - Paying consumes debt down to zero; any excess becomes credit.
    - Charging consumes credit first; only the rest becomes debt.
    """

    @staticmethod
    def credit_or_debit(
        position: CustomerPosition, invoice_total: Decimal, amount_paid: Decimal
    ) -> CustomerPosition:
        """
        Effect of a new invoice on the customer

        Overpayment goes to credit, underpayment goes to debt, and the
        invoice total is added to total_sales. Existing credit is not
        consumed here.
        """
        invoice_total = to_money(invoice_total)
        amount_paid = to_money(amount_paid)

        current_debt = position.current_debt
        credit_balance = position.credit_balance
        if amount_paid > invoice_total:
            credit_balance += amount_paid - invoice_total
        elif amount_paid < invoice_total:
            current_debt += invoice_total - amount_paid

        return CustomerPosition(
            total_sales=position.total_sales + invoice_total,
            current_debt=current_debt,
            credit_balance=credit_balance,
        )

    @staticmethod
    def apply_payment(position: CustomerPosition, amount: Decimal) -> CustomerPosition:
        """Pay down debt; overflow below zero is moved to credit"""
        amount = to_money(amount)
        remaining_debt = position.current_debt - amount
        if remaining_debt < ZERO:
            return replace(
                position,
                current_debt=ZERO,
                credit_balance=position.credit_balance + (-remaining_debt),
            )
        return replace(position, current_debt=remaining_debt)

    @staticmethod
    def charge(position: CustomerPosition, amount: Decimal) -> CustomerPosition:
        """Add a charge, paying it from credit first"""
        amount = to_money(amount)
        current_debt = position.current_debt + amount
        credit_balance = position.credit_balance
        if credit_balance > ZERO:
            used = min(credit_balance, amount)
            credit_balance -= used
            current_debt -= used
        return replace(position, current_debt=current_debt, credit_balance=credit_balance)

    @classmethod
    def rollback_payment(cls, position: CustomerPosition, amount: Decimal) -> CustomerPosition:
        """
        Undo apply_payment(amount)

        Restores the debt first, then claws back credit the payment may
        have created, limited to the credit still available. When credit
        was spent by unrelated operations in between, this is not an exact
        inverse: the missing credit stays restored as debt.
        """
        return cls.charge(position, amount)

    @staticmethod
    def reverse_invoice_deletion(
        position: CustomerPosition, invoice_amount_paid: Decimal, invoice_total: Decimal
    ) -> CustomerPosition:
        """Effect of deleting an invoice that has no payments"""
        invoice_amount_paid = to_money(invoice_amount_paid)
        return CustomerPosition(
            total_sales=position.total_sales - to_money(invoice_total),
            current_debt=max(position.current_debt - invoice_amount_paid, ZERO),
            credit_balance=position.credit_balance + invoice_amount_paid,
        )

    @classmethod
    def adjust_for_invoice_edit(
        cls, position: CustomerPosition, total_delta: Decimal, paid_delta: Decimal
    ) -> CustomerPosition:
        """
        Move the customer by the change of an edited invoice

        A higher total is charged and a lower one refunded; a higher
        amount paid is applied as a payment and a lower one rolled back.
        """
        total_delta = to_money(total_delta)
        paid_delta = to_money(paid_delta)

        position = replace(position, total_sales=position.total_sales + total_delta)
        if total_delta > ZERO:
            position = cls.charge(position, total_delta)
        elif total_delta < ZERO:
            position = cls.apply_payment(position, -total_delta)

        if paid_delta > ZERO:
            position = cls.apply_payment(position, paid_delta)
        elif paid_delta < ZERO:
            position = cls.rollback_payment(position, -paid_delta)
        return position
