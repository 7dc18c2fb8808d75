from .base import BaseModel
from .outlet import Outlet
from .product import Product, ProductStatus
from .customer import Customer
from .invoice import Invoice, InvoiceStatus
from .invoice_line import InvoiceLine
from .payment import Payment, PaymentMethod
from .customer_account import CustomerAccount, CustomerPosition
from .invoice_account import InvoiceAccount, InvoiceTotals, LineItem

__all__ = [
    "BaseModel",
    "Outlet",
    "Product",
    "ProductStatus",
    "Customer",
    "Invoice",
    "InvoiceStatus",
    "InvoiceLine",
    "Payment",
    "PaymentMethod",
    "CustomerAccount",
    "CustomerPosition",
    "InvoiceAccount",
    "InvoiceTotals",
    "LineItem",
]
