"""Ledger use cases"""
from .create_invoice import CreateInvoice
from .edit_invoice import EditInvoice
from .delete_invoice import DeleteInvoice
from .get_invoice import GetInvoice
from .list_invoices import ListInvoices
from .record_payment import RecordPayment
from .edit_payment import EditPayment
from .delete_payment import DeletePayment
from .list_payments import ListPayments
from .create_customer import CreateCustomer
from .get_customer_account import GetCustomerAccount
from .list_debtors import ListDebtors
from .adjust_customer_debt import AdjustCustomerDebt
from .delete_customer import DeleteCustomer
from .reconcile_invoices import ReconcileInvoices
from .dtos import (
    InvoiceItemCommandDTO,
    CreateInvoiceCommandDTO,
    EditInvoiceCommandDTO,
    RecordPaymentCommandDTO,
    EditPaymentCommandDTO,
    CreateCustomerCommandDTO,
    AdjustDebtCommandDTO,
    InvoiceLineDTO,
    InvoiceResponseDTO,
    PaymentResponseDTO,
    EditInvoiceResponseDTO,
    CustomerAccountResponseDTO,
    DebtorsResponseDTO,
    ListInvoicesResponseDTO,
    ListPaymentsResponseDTO,
    DeletedResponseDTO,
    InvoiceDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "CreateInvoice",
    "EditInvoice",
    "DeleteInvoice",
    "GetInvoice",
    "ListInvoices",
    "RecordPayment",
    "EditPayment",
    "DeletePayment",
    "ListPayments",
    "CreateCustomer",
    "GetCustomerAccount",
    "ListDebtors",
    "AdjustCustomerDebt",
    "DeleteCustomer",
    "ReconcileInvoices",
    "InvoiceItemCommandDTO",
    "CreateInvoiceCommandDTO",
    "EditInvoiceCommandDTO",
    "RecordPaymentCommandDTO",
    "EditPaymentCommandDTO",
    "CreateCustomerCommandDTO",
    "AdjustDebtCommandDTO",
    "InvoiceLineDTO",
    "InvoiceResponseDTO",
    "PaymentResponseDTO",
    "EditInvoiceResponseDTO",
    "CustomerAccountResponseDTO",
    "DebtorsResponseDTO",
    "ListInvoicesResponseDTO",
    "ListPaymentsResponseDTO",
    "DeletedResponseDTO",
    "InvoiceDiscrepancyDTO",
    "ReconciliationResultDTO",
]
