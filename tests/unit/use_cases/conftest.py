"""Dict-backed repository mocks shared by the ledger use case tests"""

import pytest
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict
from unittest.mock import AsyncMock, MagicMock

from src.domain.customer import Customer
from src.domain.invoice import Invoice
from src.domain.invoice_line import InvoiceLine
from src.domain.outlet import Outlet
from src.domain.payment import Payment
from src.domain.product import Product


@dataclass
class Store:
    outlets: Dict[int, Outlet] = field(default_factory=dict)
    customers: Dict[int, Customer] = field(default_factory=dict)
    products: Dict[int, Product] = field(default_factory=dict)
    invoices: Dict[int, Invoice] = field(default_factory=dict)
    lines: Dict[int, InvoiceLine] = field(default_factory=dict)
    payments: Dict[int, Payment] = field(default_factory=dict)

    def lines_of(self, invoice_id):
        return sorted(
            (line for line in self.lines.values() if line.invoice_id == invoice_id),
            key=lambda line: line.position,
        )


def _creator(table):
    async def create(entity):
        entity.id = max(table, default=0) + 1
        table[entity.id] = entity
        return entity
    return create


def _getter(table):
    async def get_by_id(entity_id, for_update=False):
        return table.get(entity_id)
    return get_by_id


def _remover(table):
    async def delete(entity):
        table.pop(entity.id, None)
    return delete


def _passthrough():
    return AsyncMock(side_effect=lambda entity: entity)


@pytest.fixture
def store():
    """Outlet 1, customer 7 and two products"""
    s = Store()
    s.outlets[1] = Outlet(
        id=1, name="Main Street", business_id="biz_1", currency="NGN",
        tax_rate=None, total_sales=Decimal("0.00"),
    )
    s.customers[7] = Customer(id=7, customer_code="CUST-1-1", name="Ada Stores", outlet_id=1)
    s.products[1] = Product(id=1, outlet_id=1, title="Rice 50kg", price=Decimal("100.00"), stock=10)
    s.products[2] = Product(id=2, outlet_id=1, title="Palm Oil 5L", price=Decimal("50.00"), stock=4)
    return s


@pytest.fixture
def outlet_repo(store):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(side_effect=_getter(store.outlets))
    repo.update = _passthrough()
    return repo


@pytest.fixture
def customer_repo(store):
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=_creator(store.customers))
    repo.get_by_id = AsyncMock(side_effect=_getter(store.customers))
    repo.update = _passthrough()
    repo.delete = AsyncMock(side_effect=_remover(store.customers))

    async def get_debtors(outlet_id=None):
        return [
            c for c in store.customers.values()
            if c.current_debt > 0 and (outlet_id is None or c.outlet_id == outlet_id)
        ]

    repo.get_debtors = AsyncMock(side_effect=get_debtors)
    return repo


@pytest.fixture
def product_repo(store):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(side_effect=_getter(store.products))
    repo.update = _passthrough()
    return repo


@pytest.fixture
def invoice_repo(store):
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=_creator(store.invoices))
    repo.get_by_id = AsyncMock(side_effect=_getter(store.invoices))
    repo.update = _passthrough()
    repo.delete = AsyncMock(side_effect=_remover(store.invoices))
    repo.get_all = AsyncMock(side_effect=lambda: list(store.invoices.values()))

    async def exists_for_customer(customer_id):
        return any(i.customer_id == customer_id for i in store.invoices.values())

    async def generate_invoice_number():
        return f"INV-2024-{len(store.invoices) + 1:06d}"

    repo.exists_for_customer = AsyncMock(side_effect=exists_for_customer)
    repo.generate_invoice_number = AsyncMock(side_effect=generate_invoice_number)
    return repo


@pytest.fixture
def invoice_line_repo(store):
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=_creator(store.lines))

    async def get_by_invoice_id(invoice_id):
        return store.lines_of(invoice_id)

    async def delete_by_invoice_id(invoice_id):
        for line in store.lines_of(invoice_id):
            store.lines.pop(line.id)

    repo.get_by_invoice_id = AsyncMock(side_effect=get_by_invoice_id)
    repo.delete_by_invoice_id = AsyncMock(side_effect=delete_by_invoice_id)
    return repo


@pytest.fixture
def payment_repo(store):
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=_creator(store.payments))
    repo.get_by_id = AsyncMock(side_effect=_getter(store.payments))
    repo.update = _passthrough()
    repo.delete = AsyncMock(side_effect=_remover(store.payments))

    async def exists_for_invoice(invoice_id):
        return any(p.invoice_id == invoice_id for p in store.payments.values())

    async def get_sums_by_invoice():
        sums = {}
        for p in store.payments.values():
            if p.invoice_id is not None:
                sums[p.invoice_id] = sums.get(p.invoice_id, Decimal("0.00")) + p.amount
        return sums

    async def get_by_invoice_id(invoice_id, for_update=False):
        linked = [p for p in store.payments.values() if p.invoice_id == invoice_id]
        return sorted(linked, key=lambda p: (p.created_at, p.id), reverse=True)

    repo.exists_for_invoice = AsyncMock(side_effect=exists_for_invoice)
    repo.get_by_invoice_id = AsyncMock(side_effect=get_by_invoice_id)
    repo.get_sums_by_invoice = AsyncMock(side_effect=get_sums_by_invoice)
    return repo


@pytest.fixture
def notifier():
    service = MagicMock()
    service.send_notification = AsyncMock(return_value=True)
    return service
