from .unit_of_work import SqlAlchemyUnitOfWork
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)
from .file_storage import LocalFileStorage, HttpFileStorage, create_file_storage
from .authenticator import StaticTokenAuthenticator

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
    "LocalFileStorage",
    "HttpFileStorage",
    "create_file_storage",
    "StaticTokenAuthenticator",
]
