"""Unit tests for EditPayment use case"""

import pytest
from decimal import Decimal

from src.app.use_cases.ledger.edit_payment import EditPayment
from src.app.use_cases.ledger.dtos import EditPaymentCommandDTO
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.payment import Payment, PaymentMethod


def make_invoice(invoice_id, total, paid):
    total, paid = Decimal(total), Decimal(paid)
    return Invoice(
        id=invoice_id,
        invoice_number=f"INV-2024-{invoice_id:06d}",
        outlet_id=1,
        customer_id=7,
        subtotal=total,
        tax=Decimal("0.00"),
        total=total,
        amount_paid=paid,
        balance=total - paid,
        status=InvoiceStatus.PARTIAL,
    )


@pytest.fixture
def existing(store):
    """Invoice 1 (1000, 1100 paid after a 700 payment), invoice 2 (500, 100 paid)"""
    store.invoices[1] = make_invoice(1, "1000.00", "1100.00")
    store.invoices[1].status = InvoiceStatus.PAID
    store.invoices[2] = make_invoice(2, "500.00", "100.00")
    store.customers[7].current_debt = Decimal("400.00")
    store.customers[7].credit_balance = Decimal("100.00")
    store.payments[1] = Payment(
        id=1, invoice_id=1, customer_id=7, amount=Decimal("700.00"), method=PaymentMethod.CASH
    )
    return store


@pytest.fixture
def use_case(mock_uow, payment_repo, invoice_repo, customer_repo, notifier):
    return EditPayment(mock_uow, payment_repo, invoice_repo, customer_repo, notification_service=notifier)


@pytest.mark.asyncio
class TestEditPayment:

    async def test_lower_amount_without_invoice_keeps_link(self, use_case, existing, notifier):
        result = await use_case.execute(
            EditPaymentCommandDTO(payment_id=1, amount=Decimal("300"), method=PaymentMethod.CASH)
        )

        assert result.is_ok()
        assert result.value.invoice_id == 1
        invoice = existing.invoices[1]
        assert invoice.amount_paid == Decimal("700.00")
        assert invoice.balance == Decimal("300.00")
        assert invoice.status == InvoiceStatus.PARTIAL
        assert existing.customers[7].credit_balance == Decimal("0.00")
        assert notifier.send_notification.call_args[0][0] == "payment.updated"

    async def test_explicit_null_unlinks(self, use_case, existing):
        result = await use_case.execute(
            EditPaymentCommandDTO(
                payment_id=1, amount=Decimal("700"), method=PaymentMethod.CASH, invoice_id=None
            )
        )

        assert result.value.invoice_id is None
        assert existing.invoices[1].amount_paid == Decimal("400.00")

    async def test_move_to_other_invoice(self, use_case, existing):
        result = await use_case.execute(
            EditPaymentCommandDTO(
                payment_id=1, amount=Decimal("400"), method=PaymentMethod.CARD, invoice_id=2
            )
        )

        assert result.value.invoice_id == 2
        assert result.value.method == "card"
        assert existing.invoices[1].amount_paid == Decimal("400.00")
        assert existing.invoices[2].amount_paid == Decimal("500.00")
        assert existing.invoices[2].status == InvoiceStatus.PAID

    async def test_unknown_payment(self, use_case, existing):
        result = await use_case.execute(
            EditPaymentCommandDTO(payment_id=9, amount=Decimal("1"), method=PaymentMethod.CASH)
        )

        assert result.error.code == "PAYMENT_NOT_FOUND"

    async def test_negative_amount(self, use_case, existing, mock_uow):
        result = await use_case.execute(
            EditPaymentCommandDTO(payment_id=1, amount=Decimal("-1"), method=PaymentMethod.CASH)
        )

        assert result.error.code == "INVALID_AMOUNT"
        assert existing.payments[1].amount == Decimal("700.00")
        mock_uow.commit.assert_not_called()
