from .outlet_repository import OutletRepository
from .product_repository import ProductRepository
from .customer_repository import CustomerRepository
from .invoice_repository import InvoiceRepository
from .invoice_line_repository import InvoiceLineRepository
from .payment_repository import PaymentRepository

__all__ = [
    "OutletRepository",
    "ProductRepository",
    "CustomerRepository",
    "InvoiceRepository",
    "InvoiceLineRepository",
    "PaymentRepository",
]
