"""
Pytest configuration and shared fixtures for Bookshelf Reader tests.

Provides an in-memory SQLite DB, an ASGI HTTP client bound to it, and
factories for users, books and orders.
"""
import os

# Settings are read at import time; configure before importing the app.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-for-pytest-only-0123456789")

import pytest
from typing import AsyncGenerator

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from database import Base, get_db
from config import settings
from domain.enums import OrderStatus, UserRole
from middleware.auth import issue_access_token

if not settings.jwt_secret:
    settings.jwt_secret = "test-jwt-secret-for-pytest-only-0123456789"


# ── Database Fixtures ────────────────────────────────────────────────


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create an in-memory SQLite database session for each test.

    Uses StaticPool to allow in-memory SQLite with async SQLAlchemy.
    """
    import db_models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    ASGI test client with the in-memory database.

    Overrides get_db dependency to use the test DB session.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


# ── Auth Fixtures ────────────────────────────────────────────────────


@pytest.fixture
def auth_headers():
    """Factory: Authorization header carrying a valid JWT for a user id."""
    def _headers(user_id: str, role: UserRole = UserRole.READER) -> dict:
        token = issue_access_token(user_id=user_id, role=role)
        return {"Authorization": f"Bearer {token}"}

    return _headers


# ── Test Data Fixtures ────────────────────────────────────────────────


@pytest.fixture
async def reader(db_session: AsyncSession):
    """A regular reader account."""
    from db_models import User

    user = User(email="reader@example.com", name="Rea Der", username="reader")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def other_reader(db_session: AsyncSession):
    """A second reader, for cross-user isolation checks."""
    from db_models import User

    user = User(email="other@example.com", name="Oth Er", username="other")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def admin(db_session: AsyncSession):
    """An administrator account."""
    from db_models import User

    user = User(email="admin@example.com", name="Ad Min", username="admin", is_admin=True)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def make_book(db_session: AsyncSession):
    """Factory: persist a book; keyword overrides replace the defaults."""
    from db_models import Book

    async def _make(**overrides):
        fields = dict(
            title="The Pragmatic Reader",
            author="A. Writer",
            description="A book about reading.",
            category="Non-fiction",
            target_audience="adults",
            price=9.99,
            has_content=True,
            content_type="pdf",
            content_url="https://cdn.example.com/books/pragmatic.pdf",
        )
        fields.update(overrides)
        book = Book(**fields)
        db_session.add(book)
        await db_session.commit()
        await db_session.refresh(book)
        return book

    return _make


@pytest.fixture
def make_order(db_session: AsyncSession):
    """Factory: persist an order for `user` listing `books` in `status`."""
    from db_models import Order, OrderItem

    async def _make(user, books, status: OrderStatus = OrderStatus.PAID):
        order = Order(user_id=user.id, status=status.value)
        for position, book in enumerate(books):
            order.items.append(
                OrderItem(product_id=book.id, name=book.title, quantity=1, position=position)
            )
        db_session.add(order)
        await db_session.commit()
        await db_session.refresh(order)
        return order

    return _make
