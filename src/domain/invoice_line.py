"""Invoice Line Domain Entity

Tracks individual line items within an invoice.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Integer, Numeric, String
from src.domain.base import BaseModel, IdType


class InvoiceLine(BaseModel, table=True):
    """
    Invoice Line - Individual line item within an invoice

    Domain Rules:
    - Each line item belongs to exactly one invoice
    - line_subtotal = quantity * unit_price
    - position keeps the order the items were entered in
    """

    __tablename__ = "invoice_lines"
    __table_args__ = (
        Index('ix_invoice_lines_invoice_id', 'invoice_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice line identifier (auto-increment)"
    )

    invoice_id: int = Field(
        sa_column=Column(IdType, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    position: int = Field(
        default=0,
        description="Zero-based order of the line on the invoice"
    )

    product_id: int = Field(
        sa_column=Column(IdType, ForeignKey("products.id"), nullable=False),
        description="Product sold"
    )

    title: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False, default=""),
        description="Product title at the time of sale"
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Price per unit"
    )

    quantity: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Units sold"
    )

    line_subtotal: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="quantity * unit_price"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
