"""Request schemas for Ledger API

Pydantic models for validating incoming HTTP requests.
"""

import base64
import binascii
from decimal import Decimal
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.payment import PaymentMethod


class InvoiceItemSchema(BaseModel):
    product_id: int = Field(..., description="Product to sell")
    quantity: int = Field(..., description="Units to sell (must be > 0)")
    unit_price: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Unit price override (defaults to the product price)"
    )


class CreateInvoiceRequestSchema(BaseModel):
    """
    Request schema for creating an invoice

    Used for POST /invoices endpoint.
    """

    outlet_id: int = Field(..., description="Issuing outlet")

    customer_id: int = Field(..., description="Customer billed")

    items: List[InvoiceItemSchema] = Field(
        default_factory=list,
        description="Line items (at least one required)"
    )

    amount_paid: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        description="Amount paid at creation time"
    )

    method: PaymentMethod = Field(default=PaymentMethod.CASH)

    reference: Optional[str] = Field(default=None, max_length=255)

    payment_terms: Optional[str] = Field(default=None)

    notes: Optional[str] = Field(default=None)

    class Config:
        json_schema_extra = {
            "example": {
                "outlet_id": 1,
                "customer_id": 7,
                "items": [
                    {"product_id": 3, "quantity": 2},
                    {"product_id": 5, "quantity": 1, "unit_price": "250.00"},
                ],
                "amount_paid": "400.00",
                "method": "cash",
            }
        }


class EditInvoiceRequestSchema(BaseModel):
    """
    Request schema for editing an invoice

    items replaces the whole item set; amount_paid is the new amount paid.
    """

    items: List[InvoiceItemSchema] = Field(default_factory=list)

    amount_paid: Decimal = Field(default=Decimal("0.00"), ge=0)

    method: PaymentMethod = Field(default=PaymentMethod.CASH)

    reference: Optional[str] = Field(default=None, max_length=255)


class RecordPaymentRequestSchema(BaseModel):
    """
    Request schema for recording a payment

    Used for POST /payments endpoint. The receipt image travels base64
    encoded and is stored after the payment commits.
    """

    customer_id: int = Field(..., description="Paying customer")

    amount: Decimal = Field(..., description="Amount received (must be > 0)")

    method: PaymentMethod = Field(..., description="cash, bank transfer, cheque or card")

    invoice_id: Optional[int] = Field(
        default=None,
        description="Invoice to apply the payment to"
    )

    reference: Optional[str] = Field(default=None, max_length=255)

    receipt_base64: Optional[str] = Field(default=None, description="Base64 encoded receipt image")

    receipt_filename: Optional[str] = Field(default=None)

    receipt_content_type: Optional[str] = Field(default=None)

    @field_validator('receipt_base64')
    @classmethod
    def validate_receipt(cls, v):
        """Ensure the receipt is valid base64"""
        if v is None:
            return v
        try:
            base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("receipt_base64 is not valid base64")
        return v

    def receipt_bytes(self) -> Optional[bytes]:
        if not self.receipt_base64:
            return None
        return base64.b64decode(self.receipt_base64)

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": 7,
                "invoice_id": 12,
                "amount": "700.00",
                "method": "bank transfer",
                "reference": "TRF-99812",
            }
        }


class EditPaymentRequestSchema(BaseModel):
    """
    Request schema for editing a payment

    Leaving invoice_id out keeps the current invoice; null unlinks it.
    """

    amount: Decimal

    method: PaymentMethod

    invoice_id: Optional[int] = None

    reference: Optional[str] = Field(default=None, max_length=255)


class CreateCustomerRequestSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    outlet_id: Optional[int] = None
    customer_type: Literal["wholesale", "retail", "corporate", "individual"] = "retail"
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    credit_limit: Decimal = Field(default=Decimal("0.00"), ge=0)
    credit_enabled: bool = False
    notes: Optional[str] = None


class AdjustDebtRequestSchema(BaseModel):
    amount: Decimal = Field(..., gt=0, description="Adjustment amount (must be > 0)")
    type: Literal["add", "subtract"]
