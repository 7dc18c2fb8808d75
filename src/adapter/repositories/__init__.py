from .outlet_repository import SqlAlchemyOutletRepository
from .product_repository import SqlAlchemyProductRepository
from .customer_repository import SqlAlchemyCustomerRepository
from .invoice_repository import SqlAlchemyInvoiceRepository
from .invoice_line_repository import SqlAlchemyInvoiceLineRepository
from .payment_repository import SqlAlchemyPaymentRepository

__all__ = [
    "SqlAlchemyOutletRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyCustomerRepository",
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyInvoiceLineRepository",
    "SqlAlchemyPaymentRepository",
]
