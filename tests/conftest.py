"""Global test fixtures for PayPortal."""

# ruff: noqa: E402
# Set test environment BEFORE importing application modules
import os


os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["REDIS_URL"] = "redis://localhost:6379/0"
os.environ["JWT__CUSTOMER_SECRET_KEY"] = "test-customer-secret-key-0123456789abcdef"
os.environ["JWT__STAFF_SECRET_KEY"] = "test-staff-secret-key-0123456789abcdef"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["CSRF_PROTECTION"] = "false"

from collections.abc import AsyncGenerator
from decimal import Decimal

import fakeredis
import fakeredis.aioredis
import pytest
import pytest_asyncio
from httpx import ASGITransport
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from payportal.abstract import Entity
from payportal.core.database import get_session
from payportal.core.redis import get_redis
from payportal.domains.customers.entities import Customer
from payportal.domains.payments.entities import Payment
from payportal.domains.staff.entities import Employee
from payportal.main import app
from payportal.security import JWTService
from payportal.security import hash_password
from payportal.utilities.enums import PaymentMethod
from payportal.utilities.enums import StaffRole


CUSTOMER_PASSWORD = "secret123"
STAFF_PASSWORD = "Passw0rd"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession]:
    """Provide a session on a fresh in-memory database for each test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Entity.metadata.create_all)

    session = AsyncSession(bind=engine, expire_on_commit=False, autoflush=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


# =============================================================================
# REDIS FIXTURES
# =============================================================================


@pytest.fixture
def fake_redis() -> fakeredis.aioredis.FakeRedis:
    """Provide a fake Redis client with its own server for each test."""
    return fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest_asyncio.fixture
async def jwt_service(fake_redis) -> JWTService:
    """Provide a JWTService instance with fake Redis."""
    return JWTService(fake_redis)


# =============================================================================
# PRINCIPAL FIXTURES
# =============================================================================


@pytest_asyncio.fixture
async def customer(db_session) -> Customer:
    """Create a registered customer."""
    customer = Customer(
        full_name="Jane Doe",
        account_number="1234567890",
        password_hash=await hash_password(CUSTOMER_PASSWORD),
    )
    db_session.add(customer)
    await db_session.flush()
    return customer


@pytest_asyncio.fixture
async def other_customer(db_session) -> Customer:
    """Create a second customer."""
    customer = Customer(
        full_name="John Smith",
        account_number="0987654321",
        password_hash=await hash_password(CUSTOMER_PASSWORD),
    )
    db_session.add(customer)
    await db_session.flush()
    return customer


@pytest_asyncio.fixture
async def super_admin(db_session) -> Employee:
    """Create the super admin (an admin without a creator)."""
    employee = Employee(
        username="root_admin",
        password_hash=await hash_password(STAFF_PASSWORD),
        role=StaffRole.ADMIN,
        created_by=None,
    )
    db_session.add(employee)
    await db_session.flush()
    return employee


@pytest_asyncio.fixture
async def admin(db_session, super_admin) -> Employee:
    """Create a regular admin created by the super admin."""
    employee = Employee(
        username="second_admin",
        password_hash=await hash_password(STAFF_PASSWORD),
        role=StaffRole.ADMIN,
        created_by=super_admin.pk,
    )
    db_session.add(employee)
    await db_session.flush()
    return employee


@pytest_asyncio.fixture
async def employee(db_session, super_admin) -> Employee:
    """Create an employee created by the super admin."""
    employee = Employee(
        username="clerk_1",
        password_hash=await hash_password(STAFF_PASSWORD),
        role=StaffRole.EMPLOYEE,
        created_by=super_admin.pk,
    )
    db_session.add(employee)
    await db_session.flush()
    return employee


@pytest_asyncio.fixture
async def pending_payment(db_session, customer) -> Payment:
    """Create a pending payment owned by ``customer``."""
    payment = Payment(
        customer_id=customer.pk,
        amount=Decimal("250.00"),
        currency="EUR",
        payment_method=PaymentMethod.BANK_TRANSFER,
        description="Invoice 42",
    )
    db_session.add(payment)
    await db_session.flush()
    return payment


# =============================================================================
# TOKEN FIXTURES
# =============================================================================


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers(jwt_service, customer) -> dict[str, str]:
    return bearer(jwt_service.issue_customer_token(customer.pk, customer.full_name))


@pytest.fixture
def other_customer_headers(jwt_service, other_customer) -> dict[str, str]:
    return bearer(jwt_service.issue_customer_token(other_customer.pk, other_customer.full_name))


@pytest.fixture
def employee_headers(jwt_service, employee) -> dict[str, str]:
    return bearer(jwt_service.issue_staff_token(employee.pk, employee.username, employee.role))


@pytest.fixture
def admin_headers(jwt_service, admin) -> dict[str, str]:
    return bearer(jwt_service.issue_staff_token(admin.pk, admin.username, admin.role))


@pytest.fixture
def super_admin_headers(jwt_service, super_admin) -> dict[str, str]:
    return bearer(jwt_service.issue_staff_token(super_admin.pk, super_admin.username, super_admin.role))


# =============================================================================
# API CLIENT FIXTURES
# =============================================================================


@pytest_asyncio.fixture
async def client(db_session, fake_redis) -> AsyncGenerator[AsyncClient]:
    """Provide an async HTTP client for API testing."""

    async def override_get_session():
        yield db_session

    async def override_get_redis():
        yield fake_redis

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_redis] = override_get_redis

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
