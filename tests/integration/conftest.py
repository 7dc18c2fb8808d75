import pytest_asyncio
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers every table on SQLModel.metadata
from src.adapter.services.file_storage import LocalFileStorage
from src.app.services.notification_service import NotificationService
from src.depends import get_file_storage, get_notification_service, get_session
from src.domain.customer import Customer
from src.domain.outlet import Outlet
from src.domain.product import Product


class RecordingNotificationService(NotificationService):
    """Keeps every sent event in memory"""

    def __init__(self):
        self.events = []

    async def send_notification(self, event, payload):
        self.events.append((event, payload))
        return True


@pytest_asyncio.fixture(scope="function")
async def engine():
    """In-memory SQLite database shared by every connection of one test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(db_session):
    """Outlet 1 with customer "Ada Stores" and two products"""
    outlet = Outlet(name="Main Street", business_id="biz_1", currency="NGN")
    db_session.add(outlet)
    await db_session.flush()

    customer = Customer(customer_code="CUST-1-1", name="Ada Stores", outlet_id=outlet.id)
    rice = Product(outlet_id=outlet.id, title="Rice 50kg", price=Decimal("100.00"), stock=10)
    oil = Product(outlet_id=outlet.id, title="Palm Oil 5L", price=Decimal("50.00"), stock=4)
    db_session.add_all([customer, rice, oil])
    await db_session.commit()

    return {"outlet": outlet, "customer": customer, "rice": rice, "oil": oil}


@pytest_asyncio.fixture
def notifier():
    return RecordingNotificationService()


@pytest_asyncio.fixture
def app(db_session, notifier, tmp_path):
    """Application with database session, notifier and receipt storage overridden"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_notification_service] = lambda: notifier
    app.dependency_overrides[get_file_storage] = lambda: LocalFileStorage(
        str(tmp_path), base_url="/receipts"
    )

    return app


@pytest_asyncio.fixture
async def client(app):
    """Create test client for the overridden application"""
    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
