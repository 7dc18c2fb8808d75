from datetime import timedelta
from decimal import Decimal
from typing import Optional
from fastapi import Depends, Header, status
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.file_storage import create_file_storage
from src.adapter.services.authenticator import StaticTokenAuthenticator
from src.app.services.authenticator import Actor, Authenticator
from src.app.services.file_storage import FileStorage
from src.app.services.notification_service import NotificationService
from src.api.error import ClientError
from src.app import error_codes

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_notification_service() -> NotificationService:
    return create_notification_service(ApplicationConfig.NOTIFICATION_WEBHOOK)


def get_file_storage() -> FileStorage:
    return create_file_storage(
        ApplicationConfig.RECEIPT_STORAGE_BACKEND,
        directory=ApplicationConfig.RECEIPT_STORAGE_DIR,
        base_url=ApplicationConfig.RECEIPT_BASE_URL,
        upload_url=ApplicationConfig.RECEIPT_UPLOAD_URL,
    )


def get_authenticator() -> Authenticator:
    return StaticTokenAuthenticator(ApplicationConfig.API_TOKENS)


def get_default_tax_rate() -> Decimal:
    return Decimal(str(ApplicationConfig.DEFAULT_TAX_RATE))


def get_payment_delete_window() -> timedelta:
    return timedelta(days=ApplicationConfig.PAYMENT_DELETE_WINDOW_DAYS)


async def get_actor(
    authorization: Optional[str] = Header(default=None),
    x_actor_id: Optional[str] = Header(default=None),
    authenticator: Authenticator = Depends(get_authenticator),
) -> Actor:
    """
    Resolve the calling actor

    With AUTH_DISABLED the X-Actor-Id header is trusted (default "system");
    otherwise a valid "Authorization: Bearer <token>" is required.
    """
    if ApplicationConfig.AUTH_DISABLED:
        return Actor(id=x_actor_id or "system")

    if not authorization or not authorization.lower().startswith("bearer "):
        raise ClientError(
            Error(code=error_codes.UNAUTHORIZED, message="Missing bearer token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    actor = await authenticator.authenticate(authorization[7:].strip())
    if actor is None:
        raise ClientError(
            Error(code=error_codes.UNAUTHORIZED, message="Invalid token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return actor
