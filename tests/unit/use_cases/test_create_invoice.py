"""Unit tests for CreateInvoice use case

Tests cover:
- Totals, status and the initial payment
- Customer debt / credit and the credit limit
- Stock reservation and rollback on failure
- Notification after commit
"""

import pytest
from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

from src.app.use_cases.ledger.create_invoice import CreateInvoice
from src.app.use_cases.ledger.dtos import CreateInvoiceCommandDTO, InvoiceItemCommandDTO
from src.domain.invoice import InvoiceStatus
from src.domain.product import ProductStatus


@pytest.fixture
def use_case(mock_uow, outlet_repo, customer_repo, product_repo, invoice_repo,
             invoice_line_repo, payment_repo, notifier):
    return CreateInvoice(
        uow=mock_uow,
        outlet_repo=outlet_repo,
        customer_repo=customer_repo,
        product_repo=product_repo,
        invoice_repo=invoice_repo,
        invoice_line_repo=invoice_line_repo,
        payment_repo=payment_repo,
        notification_service=notifier,
    )


def command(*items, amount_paid="0"):
    return CreateInvoiceCommandDTO(
        outlet_id=1,
        customer_id=7,
        items=[InvoiceItemCommandDTO(product_id=p, quantity=q) for p, q in items],
        amount_paid=Decimal(amount_paid),
    )


@pytest.mark.asyncio
class TestCreateInvoiceSuccess:

    async def test_partially_paid_invoice(self, use_case, store, mock_uow, notifier):
        """
        Given: 10 x 100.00 sold, 400.00 paid up front
        When: the invoice is created
        Then: balance 600, partial, one 400 payment, customer owes 600
        """
        result = await use_case.execute(command((1, 10), amount_paid="400"))

        assert result.is_ok()
        invoice = result.value
        assert invoice.invoice_number == "INV-2024-000001"
        assert invoice.total == Decimal("1000.00")
        assert invoice.amount_paid == Decimal("400.00")
        assert invoice.balance == Decimal("600.00")
        assert invoice.amount_due == Decimal("600.00")
        assert invoice.status == "partial"
        assert invoice.due_date == invoice.issue_date + timedelta(days=30)
        assert [line.title for line in invoice.items] == ["Rice 50kg"]

        payments = list(store.payments.values())
        assert len(payments) == 1
        assert payments[0].amount == Decimal("400.00")
        assert payments[0].invoice_id == invoice.invoice_id

        customer = store.customers[7]
        assert customer.current_debt == Decimal("600.00")
        assert customer.total_sales == Decimal("1000.00")
        assert customer.total_transactions == 1
        assert customer.average_purchase == Decimal("1000.00")
        assert customer.last_purchase_at is not None
        assert store.outlets[1].total_sales == Decimal("1000.00")

        assert store.products[1].stock == 0
        assert store.products[1].status == ProductStatus.OUT_OF_STOCK

        mock_uow.commit.assert_called_once()
        notifier.send_notification.assert_called_once()
        assert notifier.send_notification.call_args[0][0] == "invoice.created"

    async def test_unpaid_invoice_creates_no_payment(self, use_case, store):
        result = await use_case.execute(command((1, 1), (2, 2)))

        assert result.is_ok()
        assert result.value.total == Decimal("200.00")
        assert result.value.status == "unpaid"
        assert [line.product_id for line in result.value.items] == [1, 2]
        assert store.payments == {}

    async def test_overpayment_becomes_credit(self, use_case, store):
        result = await use_case.execute(command((2, 1), amount_paid="80"))

        assert result.value.status == "paid"
        assert result.value.balance == Decimal("-30.00")
        assert result.value.amount_due == Decimal("0.00")
        assert store.customers[7].credit_balance == Decimal("30.00")
        assert store.customers[7].current_debt == Decimal("0.00")

    async def test_outlet_tax_rate_applies(self, use_case, store):
        store.outlets[1].tax_rate = Decimal("7.50")

        result = await use_case.execute(command((1, 2)))

        assert result.value.tax == Decimal("15.00")
        assert result.value.total == Decimal("215.00")

    async def test_default_tax_rate_when_outlet_has_none(
        self, mock_uow, outlet_repo, customer_repo, product_repo, invoice_repo,
        invoice_line_repo, payment_repo
    ):
        use_case = CreateInvoice(
            mock_uow, outlet_repo, customer_repo, product_repo, invoice_repo,
            invoice_line_repo, payment_repo, default_tax_rate=Decimal("10"),
        )

        result = await use_case.execute(command((1, 1)))

        assert result.value.tax == Decimal("10.00")
        assert result.value.total == Decimal("110.00")

    async def test_notification_failure_does_not_fail_invoice(self, use_case, notifier):
        notifier.send_notification = AsyncMock(side_effect=RuntimeError("webhook down"))

        result = await use_case.execute(command((1, 1)))

        assert result.is_ok()


@pytest.mark.asyncio
class TestCreateInvoiceFailure:

    async def test_items_required(self, use_case, mock_uow):
        result = await use_case.execute(command())

        assert result.error.code == "ITEMS_REQUIRED"
        mock_uow.commit.assert_not_called()

    async def test_unknown_outlet(self, use_case):
        cmd = command((1, 1))
        cmd.outlet_id = 99

        result = await use_case.execute(cmd)

        assert result.error.code == "OUTLET_NOT_FOUND"

    async def test_unknown_customer(self, use_case):
        cmd = command((1, 1))
        cmd.customer_id = 99

        result = await use_case.execute(cmd)

        assert result.error.code == "CUSTOMER_NOT_FOUND"

    async def test_unknown_product(self, use_case):
        result = await use_case.execute(command((42, 1)))

        assert result.error.code == "PRODUCT_NOT_FOUND"

    async def test_invalid_quantity(self, use_case):
        result = await use_case.execute(command((1, 0)))

        assert result.error.code == "INVALID_QUANTITY"

    async def test_insufficient_stock_on_last_line_rolls_back(
        self, use_case, mock_uow, invoice_repo, notifier
    ):
        """Second line wants 5 of a product with 4 on hand"""
        result = await use_case.execute(command((1, 1), (2, 5)))

        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_STOCK"
        invoice_repo.create.assert_not_called()
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()
        notifier.send_notification.assert_not_called()

    async def test_credit_limit_exceeded(self, use_case, store, invoice_repo, mock_uow):
        store.customers[7].credit_limit = Decimal("500.00")

        result = await use_case.execute(command((1, 6)))

        assert result.error.code == "CREDIT_LIMIT_EXCEEDED"
        invoice_repo.create.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_credit_limit_not_hit_when_paid(self, use_case, store):
        store.customers[7].credit_limit = Decimal("500.00")

        result = await use_case.execute(command((1, 6), amount_paid="200"))

        assert result.is_ok()
        assert store.customers[7].current_debt == Decimal("400.00")

    async def test_repository_exception_is_transaction_failed(self, use_case, invoice_repo, mock_uow):
        invoice_repo.create = AsyncMock(side_effect=RuntimeError("connection reset"))

        result = await use_case.execute(command((1, 1)))

        assert result.error.code == "TRANSACTION_FAILED"
        mock_uow.rollback.assert_called_once()
