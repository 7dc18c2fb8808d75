"""Unit tests for StockLedger"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.services.stock_ledger import StockLedger
from src.domain.invoice_account import LineItem
from src.domain.product import Product, ProductStatus


def make_product(product_id: int, stock: int) -> Product:
    return Product(
        id=product_id,
        outlet_id=1,
        title=f"Product {product_id}",
        price=Decimal("100.00"),
        stock=stock,
    )


@pytest.fixture
def products():
    return {1: make_product(1, 10), 2: make_product(2, 3)}


@pytest.fixture
def mock_product_repo(products):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(side_effect=lambda product_id, for_update=False: products.get(product_id))
    repo.update = AsyncMock(side_effect=lambda product: product)
    return repo


@pytest.fixture
def stock_ledger(mock_product_repo):
    return StockLedger(mock_product_repo)


@pytest.mark.asyncio
class TestReserve:

    async def test_deducts_stock(self, stock_ledger, mock_product_repo, products):
        result = await stock_ledger.reserve(1, 4)

        assert result.is_ok()
        assert products[1].stock == 6
        mock_product_repo.get_by_id.assert_called_once_with(1, for_update=True)
        mock_product_repo.update.assert_called_once()

    async def test_insufficient_stock(self, stock_ledger, mock_product_repo, products):
        result = await stock_ledger.reserve(2, 4)

        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_STOCK"
        assert products[2].stock == 3
        mock_product_repo.update.assert_not_called()

    async def test_reserve_all_marks_out_of_stock(self, stock_ledger, products):
        result = await stock_ledger.reserve(2, 3)

        assert result.is_ok()
        assert products[2].stock == 0
        assert products[2].status == ProductStatus.OUT_OF_STOCK

    async def test_unknown_product(self, stock_ledger):
        result = await stock_ledger.reserve(99, 1)

        assert result.is_err()
        assert result.error.code == "PRODUCT_NOT_FOUND"

    @pytest.mark.parametrize("quantity", [0, -1])
    async def test_quantity_must_be_positive(self, stock_ledger, mock_product_repo, quantity):
        result = await stock_ledger.reserve(1, quantity)

        assert result.is_err()
        assert result.error.code == "INVALID_QUANTITY"
        mock_product_repo.get_by_id.assert_not_called()


@pytest.mark.asyncio
class TestRelease:

    async def test_restores_stock(self, stock_ledger, products):
        products[2].stock = 0
        products[2].refresh_status()

        result = await stock_ledger.release(2, 2)

        assert result.is_ok()
        assert products[2].stock == 2
        assert products[2].status == ProductStatus.ACTIVE


@pytest.mark.asyncio
class TestReplaceItems:

    async def test_release_then_reserve_allows_redistribution(self, stock_ledger, products):
        """Moving all 3 units between lines must fit although only 3 exist"""
        await stock_ledger.reserve(2, 3)
        assert products[2].stock == 0

        old = [LineItem(product_id=2, unit_price=Decimal("1"), quantity=3)]
        new = [
            LineItem(product_id=2, unit_price=Decimal("1"), quantity=1),
            LineItem(product_id=2, unit_price=Decimal("1"), quantity=2),
        ]

        result = await stock_ledger.replace_items(old, new)

        assert result.is_ok()
        assert products[2].stock == 0

    async def test_same_quantities_conserve_stock(self, stock_ledger, products):
        items = [
            LineItem(product_id=1, unit_price=Decimal("1"), quantity=4),
            LineItem(product_id=2, unit_price=Decimal("1"), quantity=1),
        ]
        await stock_ledger.reserve_items(items)
        before = {pid: p.stock for pid, p in products.items()}

        result = await stock_ledger.replace_items(items, items)

        assert result.is_ok()
        assert {pid: p.stock for pid, p in products.items()} == before

    async def test_failure_reports_first_rejected_line(self, stock_ledger):
        new = [
            LineItem(product_id=1, unit_price=Decimal("1"), quantity=1),
            LineItem(product_id=2, unit_price=Decimal("1"), quantity=50),
        ]

        result = await stock_ledger.replace_items([], new)

        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_STOCK"
        assert "product_id=2" in result.error.reason
