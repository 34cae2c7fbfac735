"""
Root conftest for the pytest test suite.

This file contains the main fixtures that are used across the entire test suite.

Each test runs against a fresh, isolated in-memory SQLite database that is
initialised on the test's own event loop. HTTP tests talk to the ASGI app
through an httpx AsyncClient on that same loop; the app's production
lifespan is never started, so the test database is the one in use.

Key Fixtures:
- `initialize_test_db`: (autouse) Creates a fresh DB schema and seeds one admin and one regular user.
- `client`: Provides a non-authenticated AsyncClient.
- `admin_user` / `regular_user`: The seeded User rows.
- `admin_headers` / `user_headers`: Authorization headers carrying a valid bearer token.
- `category_factory`, `item_factory`, `sale_factory`: Create rows directly in the database.
"""

import datetime
from typing import Any, AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from inventory_tracker.core.config import build_tortoise_config
from inventory_tracker.features.auth.models import User
from inventory_tracker.features.auth.security import create_access_token, get_password_hash
from inventory_tracker.features.inventory.models import Category, Item
from inventory_tracker.features.sales.models import Sale
from inventory_tracker.main import app as actual_app

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "adminpassword123"
USER_EMAIL = "user@example.com"
USER_PASSWORD = "userpassword123"


def get_auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """
    Specifies the asyncio backend for async fixtures.
    """
    return "asyncio"


@pytest_asyncio.fixture(scope="function", autouse=True)
async def initialize_test_db() -> AsyncGenerator[None, None]:
    """
    Initializes the database for each test function.

    This async, autouse fixture creates a fresh in-memory database and schema
    for each test and tears it down afterwards.
    """
    await Tortoise.init(config=build_tortoise_config("sqlite://:memory:"))
    await Tortoise.generate_schemas()
    await User.create(
        name="Admin Fixture",
        email=ADMIN_EMAIL,
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        role="admin",
    )
    await User.create(
        name="User Fixture",
        email=USER_EMAIL,
        hashed_password=get_password_hash(USER_PASSWORD),
        role="user",
    )

    yield

    await Tortoise.close_connections()


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, Any]:
    """
    Provides a non-authenticated httpx AsyncClient bound to the ASGI app.
    """
    transport = ASGITransport(app=actual_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def admin_user() -> User:
    return await User.get(email=ADMIN_EMAIL)


@pytest_asyncio.fixture
async def regular_user() -> User:
    return await User.get(email=USER_EMAIL)


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return get_auth_headers(create_access_token(data={"sub": admin_user.public_id}))


@pytest.fixture
def user_headers(regular_user: User) -> dict:
    return get_auth_headers(create_access_token(data={"sub": regular_user.public_id}))


@pytest.fixture
def category_factory():
    """A factory to create categories."""

    async def _factory(name: str, description: Optional[str] = None) -> Category:
        return await Category.create(name=name, description=description)

    return _factory


@pytest.fixture
def item_factory():
    """A factory to create items."""

    async def _factory(
        name: str,
        price: float = 10.0,
        quantity: int = 20,
        category: Optional[Category] = None,
        description: Optional[str] = None,
    ) -> Item:
        return await Item.create(
            name=name,
            price=price,
            quantity=quantity,
            category=category,
            description=description,
        )

    return _factory


@pytest.fixture
def sale_factory():
    """A factory to create sales at a given moment; the amount defaults to price x quantity."""

    async def _factory(
        item: Item,
        quantity: int = 1,
        total_amount: Optional[float] = None,
        sale_date: Optional[datetime.datetime] = None,
    ) -> Sale:
        if total_amount is None:
            total_amount = item.price * quantity
        if sale_date is None:
            sale_date = datetime.datetime.now(datetime.timezone.utc)
        return await Sale.create(
            item=item, quantity=quantity, total_amount=total_amount, sale_date=sale_date
        )

    return _factory
