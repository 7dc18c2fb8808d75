"""Product Domain Entity

Catalog product with the on-hand stock the stock ledger reserves from.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String
from src.domain.base import BaseModel, IdType


class ProductStatus(str, Enum):
    """Product availability"""
    ACTIVE = "active"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"


class Product(BaseModel, table=True):
    """
    Product - Sellable item with tracked stock

    Domain Rules:
    - Stock is an integer and never negative
    - Status is out_of_stock while stock is zero
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint('stock >= 0', name='stock_non_negative'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique product identifier (auto-increment)"
    )

    outlet_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("outlets.id"), nullable=True),
        description="Outlet the product is stocked at"
    )

    title: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Product title shown on invoices"
    )

    sku: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
    )

    price: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Default unit selling price"
    )

    stock: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Units on hand (>= 0)"
    )

    reorder_level: int = Field(default=5)

    status: ProductStatus = Field(default=ProductStatus.ACTIVE)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def refresh_status(self) -> None:
        """Keep status in step with stock (discontinued stays discontinued)"""
        if self.status == ProductStatus.DISCONTINUED:
            return
        self.status = ProductStatus.ACTIVE if self.stock > 0 else ProductStatus.OUT_OF_STOCK
