"""Data Transfer Objects for Ledger Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from src.domain.customer import Customer
from src.domain.invoice import Invoice
from src.domain.invoice_line import InvoiceLine
from src.domain.money import amount_due
from src.domain.payment import Payment, PaymentMethod


class InvoiceItemCommandDTO(BaseModel):
    """One requested line of an invoice"""

    product_id: int = Field(
        ...,
        description="Product to sell"
    )

    quantity: int = Field(
        ...,
        description="Units to sell (must be > 0)"
    )

    unit_price: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Unit price override (defaults to the product price)"
    )


class CreateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating an invoice

    Used as input to CreateInvoice use case.
    """

    outlet_id: int = Field(..., description="Issuing outlet")

    customer_id: int = Field(..., description="Customer billed")

    items: List[InvoiceItemCommandDTO] = Field(
        default_factory=list,
        description="Line items (at least one required)"
    )

    amount_paid: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        description="Amount paid at creation time"
    )

    method: PaymentMethod = Field(
        default=PaymentMethod.CASH,
        description="Method of the initial payment"
    )

    reference: Optional[str] = Field(default=None)

    payment_terms: Optional[str] = Field(default=None)

    notes: Optional[str] = Field(default=None)

    created_by: Optional[str] = Field(default=None)

    class Config:
        json_schema_extra = {
            "example": {
                "outlet_id": 1,
                "customer_id": 7,
                "items": [{"product_id": 3, "quantity": 2}],
                "amount_paid": "400.00",
                "method": "cash",
            }
        }


class EditInvoiceCommandDTO(BaseModel):
    """
    Command DTO for editing an invoice

    The item set replaces the previous one; amount_paid is the new total
    paid on the invoice.
    """

    invoice_id: int

    items: List[InvoiceItemCommandDTO] = Field(default_factory=list)

    amount_paid: Decimal = Field(default=Decimal("0.00"), ge=0)

    method: PaymentMethod = Field(
        default=PaymentMethod.CASH,
        description="Method of the payment created for an increased amount_paid"
    )

    reference: Optional[str] = Field(default=None)

    created_by: Optional[str] = Field(default=None)


class RecordPaymentCommandDTO(BaseModel):
    """
    Command DTO for recording a payment

    amount is validated by the use case (INVALID_AMOUNT), not here.
    """

    customer_id: int

    amount: Decimal

    method: PaymentMethod

    invoice_id: Optional[int] = Field(
        default=None,
        description="Invoice to apply the payment to (None = unlinked)"
    )

    reference: Optional[str] = Field(default=None)

    created_by: Optional[str] = Field(default=None)


class EditPaymentCommandDTO(BaseModel):
    """
    Command DTO for editing a payment

    Leaving invoice_id out keeps the current link; an explicit null
    unlinks the payment.
    """

    payment_id: int

    amount: Decimal

    method: PaymentMethod

    invoice_id: Optional[int] = None

    reference: Optional[str] = None

    def keeps_invoice_link(self) -> bool:
        return "invoice_id" not in self.model_fields_set


class CreateCustomerCommandDTO(BaseModel):
    name: str = Field(..., min_length=1)
    outlet_id: Optional[int] = None
    customer_type: Literal["wholesale", "retail", "corporate", "individual"] = "retail"
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    credit_limit: Decimal = Field(default=Decimal("0.00"), ge=0)
    credit_enabled: bool = False
    notes: Optional[str] = None


class AdjustDebtCommandDTO(BaseModel):
    """Manual debt correction: add increases debt, subtract lowers it (not below 0)"""

    customer_id: int
    amount: Decimal = Field(..., gt=0)
    type: Literal["add", "subtract"]


class InvoiceLineDTO(BaseModel):
    product_id: int
    title: str
    unit_price: Decimal
    quantity: int
    line_subtotal: Decimal

    @classmethod
    def from_entity(cls, line: InvoiceLine) -> "InvoiceLineDTO":
        return cls(
            product_id=line.product_id,
            title=line.title,
            unit_price=line.unit_price,
            quantity=line.quantity,
            line_subtotal=line.line_subtotal,
        )


class InvoiceResponseDTO(BaseModel):
    """
    Response DTO for invoice operations

    balance is exact (negative when overpaid); amount_due is the balance
    floored at zero.
    """

    invoice_id: int
    invoice_number: str
    outlet_id: int
    customer_id: int
    status: str
    items: List[InvoiceLineDTO]
    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    total: Decimal
    amount_paid: Decimal
    balance: Decimal
    amount_due: Decimal
    currency: str
    issue_date: date
    due_date: Optional[date] = None
    payment_terms: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, invoice: Invoice, lines: List[InvoiceLine]) -> "InvoiceResponseDTO":
        return cls(
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            outlet_id=invoice.outlet_id,
            customer_id=invoice.customer_id,
            status=invoice.status.value,
            items=[
                InvoiceLineDTO.from_entity(line)
                for line in sorted(lines, key=lambda line: line.position)
            ],
            subtotal=invoice.subtotal,
            tax_rate=invoice.tax_rate,
            tax=invoice.tax,
            total=invoice.total,
            amount_paid=invoice.amount_paid,
            balance=invoice.balance,
            amount_due=amount_due(invoice.balance),
            currency=invoice.currency,
            issue_date=invoice.issue_date,
            due_date=invoice.due_date,
            payment_terms=invoice.payment_terms,
            notes=invoice.notes,
            created_by=invoice.created_by,
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
        )


class PaymentResponseDTO(BaseModel):
    payment_id: int
    invoice_id: Optional[int] = None
    customer_id: int
    amount: Decimal
    method: str
    reference: Optional[str] = None
    receipt: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentResponseDTO":
        return cls(
            payment_id=payment.id,
            invoice_id=payment.invoice_id,
            customer_id=payment.customer_id,
            amount=payment.amount,
            method=payment.method.value,
            reference=payment.reference,
            receipt=payment.receipt,
            created_by=payment.created_by,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )


class EditInvoiceResponseDTO(BaseModel):
    """Edited invoice plus the payment created for an increased amount_paid"""

    invoice: InvoiceResponseDTO
    payment: Optional[PaymentResponseDTO] = None


class CustomerAccountResponseDTO(BaseModel):
    customer_id: int
    customer_code: str
    name: str
    outlet_id: Optional[int] = None
    total_sales: Decimal
    current_debt: Decimal
    credit_balance: Decimal
    credit_limit: Decimal
    credit_enabled: bool
    total_transactions: int
    average_purchase: Decimal
    last_purchase_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, customer: Customer) -> "CustomerAccountResponseDTO":
        return cls(
            customer_id=customer.id,
            customer_code=customer.customer_code,
            name=customer.name,
            outlet_id=customer.outlet_id,
            total_sales=customer.total_sales,
            current_debt=customer.current_debt,
            credit_balance=customer.credit_balance,
            credit_limit=customer.credit_limit,
            credit_enabled=customer.credit_enabled,
            total_transactions=customer.total_transactions,
            average_purchase=customer.average_purchase,
            last_purchase_at=customer.last_purchase_at,
        )


class DebtorsResponseDTO(BaseModel):
    count: int
    total_debt: Decimal
    debtors: List[CustomerAccountResponseDTO]


class ListInvoicesResponseDTO(BaseModel):
    invoices: List[InvoiceResponseDTO]
    total: int
    limit: int
    offset: int


class ListPaymentsResponseDTO(BaseModel):
    payments: List[PaymentResponseDTO]
    total: int
    limit: int
    offset: int


class DeletedResponseDTO(BaseModel):
    id: int
    deleted: bool = True


class InvoiceDiscrepancyDTO(BaseModel):
    """One invoice failing a balance/status/payment check"""

    invoice_id: int
    invoice_number: str
    check: Literal["balance", "status", "payments"]
    expected: str
    actual: str


class ReconciliationResultDTO(BaseModel):
    total_invoices_checked: int
    discrepancies_found: int
    discrepancies: List[InvoiceDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int
