"""Unit tests for DeletePayment use case"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from src.app.use_cases.ledger.delete_payment import DeletePayment
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.payment import Payment, PaymentMethod

CREATED_AT = datetime(2024, 3, 1, 12, 0, 0)


@pytest.fixture
def existing(store):
    store.invoices[1] = Invoice(
        id=1,
        invoice_number="INV-2024-000001",
        outlet_id=1,
        customer_id=7,
        subtotal=Decimal("200.00"),
        tax=Decimal("0.00"),
        total=Decimal("200.00"),
        amount_paid=Decimal("200.00"),
        balance=Decimal("0.00"),
        status=InvoiceStatus.PAID,
    )
    store.payments[1] = Payment(
        id=1,
        invoice_id=1,
        customer_id=7,
        amount=Decimal("200.00"),
        method=PaymentMethod.CASH,
        created_at=CREATED_AT,
    )
    return store


@pytest.fixture
def use_case(mock_uow, payment_repo, invoice_repo, customer_repo, notifier):
    return DeletePayment(mock_uow, payment_repo, invoice_repo, customer_repo, notification_service=notifier)


@pytest.mark.asyncio
class TestDeletePayment:

    async def test_recent_payment_is_reversed(self, use_case, existing, notifier):
        result = await use_case.execute(1, now=CREATED_AT + timedelta(days=2))

        assert result.is_ok()
        assert result.value.id == 1
        assert existing.payments == {}
        assert existing.invoices[1].amount_paid == Decimal("0.00")
        assert existing.invoices[1].status == InvoiceStatus.UNPAID
        assert existing.customers[7].current_debt == Decimal("200.00")
        assert notifier.send_notification.call_args[0][0] == "payment.deleted"

    async def test_old_payment_is_kept(self, use_case, existing, mock_uow, notifier):
        result = await use_case.execute(1, now=CREATED_AT + timedelta(days=7, minutes=1))

        assert result.error.code == "OUTSIDE_DELETE_WINDOW"
        assert 1 in existing.payments
        mock_uow.rollback.assert_called_once()
        notifier.send_notification.assert_not_called()

    async def test_configured_window(self, mock_uow, payment_repo, invoice_repo, customer_repo, existing):
        use_case = DeletePayment(
            mock_uow, payment_repo, invoice_repo, customer_repo, delete_window=timedelta(days=30)
        )

        result = await use_case.execute(1, now=CREATED_AT + timedelta(days=20))

        assert result.is_ok()

    async def test_unknown_payment(self, use_case, existing):
        result = await use_case.execute(2)

        assert result.error.code == "PAYMENT_NOT_FOUND"
