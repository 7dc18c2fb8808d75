from .unit_of_work import UnitOfWork
from .notification_service import NotificationService
from .file_storage import FileStorage
from .authenticator import Actor, Authenticator
from .stock_ledger import StockLedger
from .payment_ledger import PaymentLedger
from .transaction_coordinator import TransactionCoordinator

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "FileStorage",
    "Actor",
    "Authenticator",
    "StockLedger",
    "PaymentLedger",
    "TransactionCoordinator",
]
