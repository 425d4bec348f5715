"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import os
import sys
from typing import Callable

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Test configuration, set before config.py is imported anywhere
os.environ["RUNTIME_ENVIRONMENT"] = "TEST"
os.environ["DB_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DELIVERY_FEE"] = "50"
os.environ["CURRENCY_SYMBOL"] = "৳"
os.environ["DEFAULT_PAYMENT_METHOD"] = "cod"
os.environ["ADMIN_ID_LIST"] = "admin-1"
os.environ["ORDER_STATUS_STRICT_TRANSITIONS"] = "false"
os.environ["ORDER_VIEW_RECONCILE_SECONDS"] = "0"
os.environ["LOG_MASK_SECRETS"] = "true"

from exceptions.auth import IdentityProviderError  # noqa: E402
from models.checkout import DeliveryDetailsDTO  # noqa: E402
from models.user import UserIdentityDTO  # noqa: E402
from utils.change_feed import ChangeFeed  # noqa: E402


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def change_feed():
    """Fresh change feed per test, so subscribers never leak between tests."""
    return ChangeFeed()


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine (in-memory SQLite, one shared connection)."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool
    )

    # Import and create all tables
    from db import Base
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def test_session_maker(test_engine, change_feed):
    """Session factory whose committed row changes go to the per-test change feed."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        info={"change_feed": change_feed}
    )


@pytest_asyncio.fixture
async def test_session(test_session_maker):
    """Create test database session."""
    async with test_session_maker() as session:
        yield session
        await session.rollback()


# ============================================================================
# External Collaborator Fakes
# ============================================================================

class FakeIdentityProvider:
    """In-memory identity provider: e-mail -> (password, user)."""

    def __init__(self):
        self.accounts: dict[str, tuple[str, UserIdentityDTO]] = {}
        self.session_user: UserIdentityDTO | None = None
        self.listeners: list[Callable] = []

    def register(self, user_id: str, email: str, password: str = "secret123", full_name: str = "Test User"):
        user = UserIdentityDTO(id=user_id, email=email, full_name=full_name)
        self.accounts[email] = (password, user)
        return user

    async def sign_up(self, email: str, password: str, full_name: str):
        if email in self.accounts:
            raise IdentityProviderError("User already registered")
        if len(password) < 6:
            raise IdentityProviderError("Password should be at least 6 characters")
        user = self.register(f"user-{len(self.accounts) + 1}", email, password, full_name)
        self.session_user = user
        return user

    async def sign_in(self, email: str, password: str):
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise IdentityProviderError("Invalid login credentials")
        self.session_user = account[1]
        return account[1]

    async def sign_out(self):
        self.session_user = None

    async def get_session(self):
        return self.session_user

    def on_session_change(self, callback):
        self.listeners.append(callback)

        def unsubscribe():
            if callback in self.listeners:
                self.listeners.remove(callback)
        return unsubscribe

    def emit(self, user: UserIdentityDTO | None):
        """Simulate a change pushed by the provider (token refresh, sign-in in another tab)."""
        self.session_user = user
        for listener in list(self.listeners):
            listener(user)


class FakeAuthorizer:
    def __init__(self, admin_ids: set[str] | None = None):
        self.admin_ids = set(admin_ids or ())
        self.calls = 0

    async def is_admin(self, user_id: str) -> bool:
        self.calls += 1
        return user_id in self.admin_ids


@pytest.fixture
def make_identity_provider():
    """Factory for independent provider clients (one per browser session) over the same accounts."""
    def _make():
        provider = FakeIdentityProvider()
        provider.register("customer-1", "alice@example.com")
        provider.register("customer-2", "bob@example.com")
        provider.register("admin-1", "admin@example.com")
        return provider
    return _make


@pytest.fixture
def identity_provider(make_identity_provider):
    return make_identity_provider()


@pytest.fixture
def authorizer():
    return FakeAuthorizer({"admin-1"})


@pytest.fixture
def delivery_details():
    return DeliveryDetailsDTO(
        street="House 12, Road 5, Dhanmondi",
        city="Dhaka",
        state="Dhaka Division",
        zip_code="1205",
        phone="01712345678",
        first_name="Alice",
        last_name="Rahman",
        email="alice@example.com"
    )


# ============================================================================
# Order Fixtures
# ============================================================================

@pytest.fixture
def create_order(test_session_maker):
    """
    Persist an order directly through the repositories (own session, committed).

    Usage:
        order_id = await create_order("customer-1", [("1", 2, 450)])
    """
    from models.order import OrderDTO
    from models.orderItem import OrderItemDTO
    from repositories.order import OrderRepository
    from repositories.orderItem import OrderItemRepository

    async def _create(user_id: str, items: list[tuple[str, int, int]] | None = None) -> int:
        items = items or [("1", 1, 450)]
        async with test_session_maker() as session:
            order_id = await OrderRepository.create(OrderDTO(
                user_id=user_id,
                total_amount=sum(quantity * price for _, quantity, price in items) + 50,
                delivery_address="House 12, Road 5",
                delivery_city="Dhaka",
                delivery_state="Dhaka Division",
                delivery_zip="1205",
                phone="01712345678"
            ), session)
            await OrderItemRepository.create_many([
                OrderItemDTO(order_id=order_id, food_id=food_id, food_name=f"Food {food_id}",
                             quantity=quantity, price=price)
                for food_id, quantity, price in items
            ], session)
            await session.commit()
        return order_id

    return _create
