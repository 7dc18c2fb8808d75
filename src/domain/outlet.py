"""Outlet Domain Entity

A selling location of a business. Holds the settings used when pricing
invoices (currency, tax rate) and a running sales total.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import Numeric, String
from src.domain.base import BaseModel, IdType


class Outlet(BaseModel, table=True):
    """
    Outlet - Point of sale owned by a business

    Domain Rules:
    - tax_rate is a percentage; None means the configured default applies
    - total_sales follows the totals of invoices issued at the outlet
    """

    __tablename__ = "outlets"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique outlet identifier (auto-increment)"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Outlet display name"
    )

    business_id: str = Field(
        index=True,
        description="Owning business identifier"
    )

    currency: str = Field(
        default="NGN",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217)"
    )

    tax_rate: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(5, 2), nullable=True),
        description="Tax rate in percent (None = configured default)"
    )

    total_sales: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Running total of invoice totals"
    )

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)
