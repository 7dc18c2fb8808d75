"""Customer Domain Entity

The unit of account aggregation: every invoice and payment of a customer
moves its debt, credit and sales totals.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, IdType
from src.domain.customer_account import CustomerPosition


class Customer(BaseModel, table=True):
    """
    Customer - Aggregate financial position of a buyer

    Domain Rules:
    - current_debt and credit_balance are never negative
    - Debt is paid down before any excess becomes credit
    - Credit is used up before any new charge becomes debt
    - credit_limit of 0 means no limit is enforced
    """

    __tablename__ = "customers"
    __table_args__ = (
        CheckConstraint('current_debt >= 0', name='current_debt_non_negative'),
        CheckConstraint('credit_balance >= 0', name='credit_balance_non_negative'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique customer identifier (auto-increment)"
    )

    customer_code: str = Field(
        index=True,
        unique=True,
        description="Human readable code (e.g., CUST-1700000000000-123)"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Customer name"
    )

    outlet_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("outlets.id"), nullable=True),
        description="Outlet the customer is registered at"
    )

    customer_type: str = Field(
        default="retail",
        description="wholesale, retail, corporate or individual"
    )

    phone: Optional[str] = Field(default=None)

    email: Optional[str] = Field(default=None)

    address: Optional[str] = Field(default=None)

    total_sales: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Sum of invoice totals"
    )

    current_debt: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Amount owed by the customer (>= 0)"
    )

    credit_balance: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Prepaid / overpaid amount held for the customer (>= 0)"
    )

    credit_limit: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Maximum allowed debt (0 = unlimited)"
    )

    credit_enabled: bool = Field(default=False)

    total_transactions: int = Field(default=0)

    average_purchase: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
    )

    last_purchase_at: Optional[datetime] = Field(default=None)

    is_active: bool = Field(default=True)

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def position(self) -> CustomerPosition:
        """Snapshot of the ledger-relevant fields"""
        return CustomerPosition(
            total_sales=self.total_sales,
            current_debt=self.current_debt,
            credit_balance=self.credit_balance,
        )

    def apply_position(self, position: CustomerPosition) -> None:
        self.total_sales = position.total_sales
        self.current_debt = position.current_debt
        self.credit_balance = position.credit_balance
