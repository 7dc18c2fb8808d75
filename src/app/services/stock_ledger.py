"""Stock Ledger

Reserves and releases product stock for invoice lines. Every call runs
inside the caller's unit of work; nothing is visible until it commits.
"""

import logging
from typing import List, Sequence
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.repositories.product_repository import ProductRepository
from src.domain.invoice_account import LineItem
from src.domain.product import Product

logger = logging.getLogger(__name__)


class StockLedger:
    """
    Per-product stock movements

    Business Rules:
    1. Stock never goes negative: reserving more than is on hand fails
    2. Rows are locked (SELECT FOR UPDATE) before being changed
    3. Replacing an item set releases every old line before reserving
       any new one, so redistributing the same quantity always fits
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def reserve(self, product_id: int, quantity: int) -> Result[Product]:
        """
        Deduct quantity from a product's stock

        Returns:
            Result[Product]: updated product, or PRODUCT_NOT_FOUND /
            INVALID_QUANTITY / INSUFFICIENT_STOCK
        """
        if quantity <= 0:
            return Return.err(
                Error(
                    code=error_codes.INVALID_QUANTITY,
                    message=f"Quantity for product {product_id} must be greater than 0",
                    reason=f"quantity={quantity}",
                )
            )

        product = await self.product_repo.get_by_id(product_id, for_update=True)
        if not product:
            return Return.err(
                Error(
                    code=error_codes.PRODUCT_NOT_FOUND,
                    message=f"Product {product_id} not found",
                )
            )

        if product.stock < quantity:
            return Return.err(
                Error(
                    code=error_codes.INSUFFICIENT_STOCK,
                    message=f"Insufficient stock for product {product.title or product_id}",
                    reason=f"product_id={product_id}, available={product.stock}, requested={quantity}",
                )
            )

        product.stock -= quantity
        product.refresh_status()
        return Return.ok(await self.product_repo.update(product))

    async def release(self, product_id: int, quantity: int) -> Result[Product]:
        """Return quantity to a product's stock"""
        if quantity <= 0:
            return Return.err(
                Error(
                    code=error_codes.INVALID_QUANTITY,
                    message=f"Quantity for product {product_id} must be greater than 0",
                    reason=f"quantity={quantity}",
                )
            )

        product = await self.product_repo.get_by_id(product_id, for_update=True)
        if not product:
            return Return.err(
                Error(
                    code=error_codes.PRODUCT_NOT_FOUND,
                    message=f"Product {product_id} not found",
                )
            )

        product.stock += quantity
        product.refresh_status()
        return Return.ok(await self.product_repo.update(product))

    async def reserve_items(self, items: Sequence[LineItem]) -> Result[List[Product]]:
        """Reserve every line; stops at the first failure"""
        products = []
        for item in items:
            result = await self.reserve(item.product_id, item.quantity)
            if result.is_err():
                return result
            products.append(result.value)
        return Return.ok(products)

    async def release_items(self, items: Sequence[LineItem]) -> Result[List[Product]]:
        products = []
        for item in items:
            result = await self.release(item.product_id, item.quantity)
            if result.is_err():
                return result
            products.append(result.value)
        return Return.ok(products)

    async def replace_items(
        self, old_items: Sequence[LineItem], new_items: Sequence[LineItem]
    ) -> Result[List[Product]]:
        """
        Swap a superseded item set for a new one (release, then reserve)

        On failure the caller must abort its unit of work; the releases
        already staged are discarded with it.
        """
        released = await self.release_items(old_items)
        if released.is_err():
            return released

        reserved = await self.reserve_items(new_items)
        if reserved.is_err():
            logger.info(
                f"Stock replacement rejected: {reserved.error.code} ({reserved.error.reason})"
            )
        return reserved
