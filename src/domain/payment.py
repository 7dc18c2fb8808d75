"""Payment Domain Entity

Money received from a customer, optionally against one invoice.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String
from src.domain.base import BaseModel, IdType


class PaymentMethod(str, Enum):
    """Accepted payment methods"""
    CASH = "cash"
    BANK_TRANSFER = "bank transfer"
    CHEQUE = "cheque"
    CARD = "card"


class Payment(BaseModel, table=True):
    """
    Payment - Money received from a customer

    Domain Rules:
    - amount > 0
    - The committed amount has exactly one effect on its customer and,
      when linked, on its invoice
    - Edits roll that effect back before applying the new one
    - Deletion is only allowed within the delete window from created_at
    """

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint('amount > 0', name='payment_amount_positive'),
        Index('ix_payments_invoice_id', 'invoice_id'),
        Index('ix_payments_customer_id', 'customer_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique payment identifier (auto-increment)"
    )

    invoice_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("invoices.id"), nullable=True),
        description="Invoice paid (None = unlinked payment)"
    )

    customer_id: int = Field(
        sa_column=Column(IdType, ForeignKey("customers.id"), nullable=False),
        description="Paying customer"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Amount received (> 0)"
    )

    method: PaymentMethod = Field(
        description="Payment method (cash, bank transfer, cheque, card)"
    )

    reference: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Bank / cheque / card reference"
    )

    receipt: Optional[str] = Field(
        default=None,
        sa_column=Column(String(1024), nullable=True),
        description="URL of the uploaded receipt (set after commit)"
    )

    created_by: Optional[str] = Field(default=None)

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Payment timestamp, start of the delete window"
    )

    updated_at: datetime = Field(default_factory=datetime.utcnow)
