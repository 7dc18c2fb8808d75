"""Turns requested invoice items into priced LineItems"""

from typing import List, Sequence
from libs.result import Result, Return, Error
from src.app import error_codes
from src.app.repositories.product_repository import ProductRepository
from src.domain.invoice_account import LineItem
from src.domain.money import to_money
from .dtos import InvoiceItemCommandDTO


async def price_items(
    product_repo: ProductRepository, items: Sequence[InvoiceItemCommandDTO]
) -> Result[List[LineItem]]:
    """
    Resolve product titles and prices for the requested items

    Errors:
        ITEMS_REQUIRED, INVALID_QUANTITY, PRODUCT_NOT_FOUND
    """
    if not items:
        return Return.err(
            Error(
                code=error_codes.ITEMS_REQUIRED,
                message="At least one invoice item is required",
            )
        )

    priced = []
    for item in items:
        if item.quantity <= 0:
            return Return.err(
                Error(
                    code=error_codes.INVALID_QUANTITY,
                    message=f"Quantity for product {item.product_id} must be greater than 0",
                    reason=f"quantity={item.quantity}",
                )
            )

        product = await product_repo.get_by_id(item.product_id, for_update=True)
        if not product:
            return Return.err(
                Error(
                    code=error_codes.PRODUCT_NOT_FOUND,
                    message=f"Product {item.product_id} not found",
                )
            )

        unit_price = item.unit_price if item.unit_price is not None else product.price
        priced.append(
            LineItem(
                product_id=product.id,
                unit_price=to_money(unit_price),
                quantity=item.quantity,
                title=product.title,
            )
        )
    return Return.ok(priced)
