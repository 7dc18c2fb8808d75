"""Invoice Domain Entity

Tracks a sale to a customer at an outlet and how much of it is paid.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String, Date, Text
from src.domain.base import BaseModel, IdType


class InvoiceStatus(str, Enum):
    """Invoice payment status"""
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class Invoice(BaseModel, table=True):
    """
    Invoice - Sale of line items to a customer

    Domain Rules:
    - invoice_number must be unique
    - total = subtotal + tax
    - balance = total - amount_paid, recomputed on every change
    - status is paid iff balance <= 0, partial iff 0 < amount_paid < total
    - Cannot be deleted once a payment references it
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_customer_id', 'customer_id'),
        Index('ix_invoices_outlet_id', 'outlet_id'),
        Index('ix_invoices_status', 'status'),
        Index('ix_invoices_invoice_number', 'invoice_number', unique=True),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice identifier (auto-increment)"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique invoice number (e.g., INV-2024-000001)"
    )

    outlet_id: int = Field(
        sa_column=Column(IdType, ForeignKey("outlets.id"), nullable=False),
        description="Outlet that issued the invoice"
    )

    business_id: Optional[str] = Field(
        default=None,
        description="Business owning the outlet"
    )

    customer_id: int = Field(
        sa_column=Column(IdType, ForeignKey("customers.id"), nullable=False),
        description="Customer billed"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.UNPAID,
        description="Invoice status (unpaid, partial, paid)"
    )

    subtotal: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Sum of line subtotals"
    )

    tax_rate: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(5, 2), nullable=False, default=0),
        description="Tax rate in percent applied to the subtotal"
    )

    tax: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Tax amount"
    )

    total: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="subtotal + tax"
    )

    amount_paid: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Amount paid against the invoice"
    )

    balance: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="total - amount_paid (negative when overpaid)"
    )

    currency: str = Field(
        default="NGN",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217)"
    )

    issue_date: date = Field(
        default_factory=date.today,
        sa_column=Column(Date, nullable=False),
    )

    due_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
    )

    payment_terms: Optional[str] = Field(default=None)

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    created_by: Optional[str] = Field(default=None)

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )
