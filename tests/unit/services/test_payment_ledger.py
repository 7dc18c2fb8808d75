"""Unit tests for PaymentLedger record / edit / delete"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.services.payment_ledger import PaymentLedger
from src.domain.customer import Customer
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.payment import Payment, PaymentMethod


@pytest.fixture
def customer():
    return Customer(
        id=7,
        customer_code="CUST-1-1",
        name="Ada Stores",
        total_sales=Decimal("1000.00"),
        current_debt=Decimal("600.00"),
        credit_balance=Decimal("0.00"),
    )


def make_invoice(invoice_id: int, total: str, paid: str, customer_id: int = 7) -> Invoice:
    total, paid = Decimal(total), Decimal(paid)
    return Invoice(
        id=invoice_id,
        invoice_number=f"INV-2024-{invoice_id:06d}",
        outlet_id=1,
        customer_id=customer_id,
        subtotal=total,
        tax=Decimal("0.00"),
        total=total,
        amount_paid=paid,
        balance=total - paid,
        status=InvoiceStatus.PARTIAL if paid else InvoiceStatus.UNPAID,
    )


@pytest.fixture
def invoices():
    return {
        1: make_invoice(1, "1000.00", "400.00"),
        2: make_invoice(2, "200.00", "0.00"),
        3: make_invoice(3, "1000.00", "0.00", customer_id=8),
    }


@pytest.fixture
def mock_customer_repo(customer):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(
        side_effect=lambda customer_id, for_update=False: customer if customer_id == customer.id else None
    )
    repo.update = AsyncMock(side_effect=lambda c: c)
    return repo


@pytest.fixture
def mock_invoice_repo(invoices):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(side_effect=lambda invoice_id, for_update=False: invoices.get(invoice_id))
    repo.update = AsyncMock(side_effect=lambda i: i)
    return repo


@pytest.fixture
def mock_payment_repo():
    repo = MagicMock()

    async def create(payment):
        payment.id = 55
        payment.created_at = payment.created_at or datetime.utcnow()
        return payment

    repo.create = AsyncMock(side_effect=create)
    repo.update = AsyncMock(side_effect=lambda p: p)
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def ledger(mock_payment_repo, mock_invoice_repo, mock_customer_repo):
    return PaymentLedger(mock_payment_repo, mock_invoice_repo, mock_customer_repo)


@pytest.mark.asyncio
class TestRecord:

    async def test_overpayment_settles_invoice_and_creates_credit(self, ledger, customer, invoices):
        result = await ledger.record(customer_id=7, amount=Decimal("700"), method=PaymentMethod.CASH, invoice_id=1)

        assert result.is_ok()
        assert result.value.amount == Decimal("700.00")
        assert invoices[1].amount_paid == Decimal("1100.00")
        assert invoices[1].balance == Decimal("-100.00")
        assert invoices[1].status == InvoiceStatus.PAID
        assert customer.current_debt == Decimal("0.00")
        assert customer.credit_balance == Decimal("100.00")

    async def test_unlinked_payment_only_moves_customer(self, ledger, customer, invoices, mock_invoice_repo):
        result = await ledger.record(customer_id=7, amount=Decimal("100"), method=PaymentMethod.CARD)

        assert result.is_ok()
        assert result.value.invoice_id is None
        assert customer.current_debt == Decimal("500.00")
        mock_invoice_repo.update.assert_not_called()

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5"), Decimal("0.001")])
    async def test_amount_must_be_positive(self, ledger, mock_payment_repo, amount):
        result = await ledger.record(customer_id=7, amount=amount, method=PaymentMethod.CASH)

        assert result.is_err()
        assert result.error.code == "INVALID_AMOUNT"
        mock_payment_repo.create.assert_not_called()

    async def test_unknown_customer(self, ledger, mock_payment_repo):
        result = await ledger.record(customer_id=99, amount=Decimal("10"), method=PaymentMethod.CASH)

        assert result.error.code == "CUSTOMER_NOT_FOUND"
        mock_payment_repo.create.assert_not_called()

    async def test_unknown_invoice(self, ledger, mock_payment_repo, customer):
        result = await ledger.record(customer_id=7, amount=Decimal("10"), method=PaymentMethod.CASH, invoice_id=42)

        assert result.error.code == "INVOICE_NOT_FOUND"
        assert customer.current_debt == Decimal("600.00")
        mock_payment_repo.create.assert_not_called()

    async def test_cannot_pay_another_customers_invoice(self, ledger, customer, invoices, mock_payment_repo):
        """
        Given: Invoice 3 belongs to customer 8
        When: Customer 7 pays 1000 against it
        Then: Nothing is recorded; neither the invoice nor the payer moves
        """
        result = await ledger.record(customer_id=7, amount=Decimal("1000"), method=PaymentMethod.CASH, invoice_id=3)

        assert result.is_err()
        assert result.error.code == "INVOICE_CUSTOMER_MISMATCH"
        assert invoices[3].amount_paid == Decimal("0.00")
        assert invoices[3].status == InvoiceStatus.UNPAID
        assert customer.current_debt == Decimal("600.00")
        assert customer.credit_balance == Decimal("0.00")
        mock_payment_repo.create.assert_not_called()


@pytest.mark.asyncio
class TestEdit:

    async def test_edit_700_down_to_300(self, ledger, customer, invoices):
        """Rollback removes the 700 effect, then 300 is applied"""
        recorded = await ledger.record(customer_id=7, amount=Decimal("700"), method=PaymentMethod.CASH, invoice_id=1)
        payment = recorded.value

        result = await ledger.edit(payment, Decimal("300"), PaymentMethod.CASH, new_invoice_id=1)

        assert result.is_ok()
        assert payment.amount == Decimal("300.00")
        assert invoices[1].amount_paid == Decimal("700.00")
        assert invoices[1].balance == Decimal("300.00")
        assert invoices[1].status == InvoiceStatus.PARTIAL
        assert customer.current_debt == Decimal("300.00")
        assert customer.credit_balance == Decimal("0.00")

    async def test_move_payment_to_another_invoice(self, ledger, customer, invoices):
        recorded = await ledger.record(customer_id=7, amount=Decimal("100"), method=PaymentMethod.CASH, invoice_id=1)

        result = await ledger.edit(recorded.value, Decimal("100"), PaymentMethod.CHEQUE, new_invoice_id=2)

        assert result.is_ok()
        assert result.value.invoice_id == 2
        assert result.value.method == PaymentMethod.CHEQUE
        assert invoices[1].amount_paid == Decimal("400.00")
        assert invoices[2].amount_paid == Decimal("100.00")
        assert invoices[2].status == InvoiceStatus.PARTIAL
        assert customer.current_debt == Decimal("500.00")

    async def test_unlink_payment(self, ledger, invoices):
        recorded = await ledger.record(customer_id=7, amount=Decimal("100"), method=PaymentMethod.CASH, invoice_id=1)

        result = await ledger.edit(recorded.value, Decimal("100"), PaymentMethod.CASH, new_invoice_id=None)

        assert result.is_ok()
        assert result.value.invoice_id is None
        assert invoices[1].amount_paid == Decimal("400.00")

    async def test_invalid_amount_changes_nothing(self, ledger, customer, invoices, mock_customer_repo):
        recorded = await ledger.record(customer_id=7, amount=Decimal("100"), method=PaymentMethod.CASH, invoice_id=1)
        mock_customer_repo.update.reset_mock()

        result = await ledger.edit(recorded.value, Decimal("0"), PaymentMethod.CASH, new_invoice_id=1)

        assert result.error.code == "INVALID_AMOUNT"
        assert recorded.value.amount == Decimal("100.00")
        mock_customer_repo.update.assert_not_called()

    async def test_unknown_new_invoice_changes_nothing(self, ledger, customer, mock_customer_repo):
        recorded = await ledger.record(customer_id=7, amount=Decimal("100"), method=PaymentMethod.CASH, invoice_id=1)
        mock_customer_repo.update.reset_mock()

        result = await ledger.edit(recorded.value, Decimal("50"), PaymentMethod.CASH, new_invoice_id=42)

        assert result.error.code == "INVOICE_NOT_FOUND"
        assert customer.current_debt == Decimal("500.00")
        mock_customer_repo.update.assert_not_called()

    async def test_cannot_move_payment_to_another_customers_invoice(
        self, ledger, customer, invoices, mock_customer_repo
    ):
        recorded = await ledger.record(customer_id=7, amount=Decimal("100"), method=PaymentMethod.CASH, invoice_id=1)
        mock_customer_repo.update.reset_mock()

        result = await ledger.edit(recorded.value, Decimal("100"), PaymentMethod.CASH, new_invoice_id=3)

        assert result.error.code == "INVOICE_CUSTOMER_MISMATCH"
        assert recorded.value.invoice_id == 1
        assert invoices[1].amount_paid == Decimal("500.00")
        assert invoices[3].amount_paid == Decimal("0.00")
        mock_customer_repo.update.assert_not_called()

    async def test_same_values_are_a_no_op(self, ledger, customer, invoices):
        recorded = await ledger.record(customer_id=7, amount=Decimal("250"), method=PaymentMethod.CASH, invoice_id=1)
        debt, paid = customer.current_debt, invoices[1].amount_paid

        await ledger.edit(recorded.value, Decimal("250"), PaymentMethod.CASH, new_invoice_id=1)

        assert customer.current_debt == debt
        assert invoices[1].amount_paid == paid


@pytest.mark.asyncio
class TestDelete:

    async def _recorded(self, ledger):
        result = await ledger.record(customer_id=7, amount=Decimal("700"), method=PaymentMethod.CASH, invoice_id=1)
        return result.value

    async def test_inside_window(self, ledger, customer, invoices, mock_payment_repo):
        payment = await self._recorded(ledger)
        now = payment.created_at + timedelta(days=6, hours=23, minutes=59)

        result = await ledger.delete(payment, now=now)

        assert result.is_ok()
        mock_payment_repo.delete.assert_called_once_with(payment)
        assert invoices[1].amount_paid == Decimal("400.00")
        assert invoices[1].status == InvoiceStatus.PARTIAL
        assert customer.current_debt == Decimal("600.00")
        assert customer.credit_balance == Decimal("0.00")

    async def test_outside_window(self, ledger, customer, invoices, mock_payment_repo):
        payment = await self._recorded(ledger)
        now = payment.created_at + timedelta(days=7, minutes=1)

        result = await ledger.delete(payment, now=now)

        assert result.is_err()
        assert result.error.code == "OUTSIDE_DELETE_WINDOW"
        mock_payment_repo.delete.assert_not_called()
        assert invoices[1].amount_paid == Decimal("1100.00")
        assert customer.credit_balance == Decimal("100.00")

    async def test_exactly_seven_days_is_still_inside(self, ledger):
        payment = await self._recorded(ledger)

        result = await ledger.delete(payment, now=payment.created_at + timedelta(days=7))

        assert result.is_ok()

    async def test_custom_window(self, mock_payment_repo, mock_invoice_repo, mock_customer_repo):
        ledger = PaymentLedger(
            mock_payment_repo, mock_invoice_repo, mock_customer_repo, delete_window=timedelta(hours=1)
        )
        payment = await self._recorded(ledger)

        result = await ledger.delete(payment, now=payment.created_at + timedelta(hours=2))

        assert result.error.code == "OUTSIDE_DELETE_WINDOW"


@pytest.mark.asyncio
class TestWithdrawFromInvoice:

    @pytest.fixture
    def linked(self, mock_payment_repo):
        """Invoice 1's 400 paid as 300 (older) + 100 (newer)"""
        base = datetime.utcnow() - timedelta(days=1)
        older = Payment(id=1, invoice_id=1, customer_id=7, amount=Decimal("300.00"),
                        method=PaymentMethod.CASH, created_at=base)
        newer = Payment(id=2, invoice_id=1, customer_id=7, amount=Decimal("100.00"),
                        method=PaymentMethod.CASH, created_at=base + timedelta(hours=1))
        mock_payment_repo.get_by_invoice_id = AsyncMock(return_value=[newer, older])
        return older, newer

    async def test_newest_first_shrinks_and_removes(self, ledger, customer, invoices, mock_payment_repo, linked):
        """
        Given: Payments of 300 and then 100 on invoice 1
        When: 250 is withdrawn
        Then: The 100 payment is removed, the 300 one shrinks to 150,
              and invoice and customer move by exactly 250
        """
        older, newer = linked

        result = await ledger.withdraw_from_invoice(invoices[1], customer, Decimal("250"))

        assert result.is_ok()
        assert result.value == Decimal("0.00")
        mock_payment_repo.delete.assert_called_once_with(newer)
        assert older.amount == Decimal("150.00")
        assert invoices[1].amount_paid == Decimal("150.00")
        assert invoices[1].balance == Decimal("850.00")
        assert customer.current_debt == Decimal("850.00")

    async def test_returns_part_no_payment_covers(self, ledger, customer, invoices, mock_payment_repo, linked):
        result = await ledger.withdraw_from_invoice(invoices[1], customer, Decimal("450"))

        assert result.value == Decimal("50.00")
        assert mock_payment_repo.delete.call_count == 2
        assert invoices[1].amount_paid == Decimal("0.00")

    async def test_payment_outside_window_blocks_everything(
        self, ledger, customer, invoices, mock_payment_repo, mock_customer_repo, linked
    ):
        older, newer = linked
        later = older.created_at + timedelta(days=7, minutes=30)

        result = await ledger.withdraw_from_invoice(invoices[1], customer, Decimal("250"), now=later)

        assert result.error.code == "OUTSIDE_DELETE_WINDOW"
        assert older.amount == Decimal("300.00")
        assert invoices[1].amount_paid == Decimal("400.00")
        mock_payment_repo.delete.assert_not_called()
        mock_customer_repo.update.assert_not_called()
