"""Background workers for the ledger service"""
from .invoice_reconciler import InvoiceReconcilerWorker

__all__ = ["InvoiceReconcilerWorker"]
