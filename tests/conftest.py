"""
Test configuration and fixtures for the House Hunt API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os

# Settings are read once at import time, so the test environment must be in place first
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-househunt-test-suite-0123456789"

import pytest
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import AsyncGenerator, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from househunt.main import app
from househunt.database import Base, get_db
from househunt.models.user import User, UserRole
from househunt.models.listing import Listing
from househunt.repositories.user import UserRepository
from househunt.repositories.listing import ListingRepository
from househunt.services.auth import AuthService
from househunt.services.listing import ListingService
from househunt.services.token import TokenService, get_token_service


TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "testpassword123"


@pytest.fixture
async def db_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database session override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def listing_repository(db_session: AsyncSession) -> ListingRepository:
    return ListingRepository(db_session)


# Service fixtures
@pytest.fixture
def token_service() -> TokenService:
    """Token service sharing the application's signing configuration."""
    return get_token_service()


@pytest.fixture
def auth_service(db_session: AsyncSession, token_service: TokenService) -> AuthService:
    return AuthService(db_session, token_service)


@pytest.fixture
def listing_service(db_session: AsyncSession) -> ListingService:
    return ListingService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: str = None,
        password: str = TEST_PASSWORD,
        name: str = "Test User",
        role: UserRole = UserRole.OWNER,
        phone: Optional[str] = "+1 555 0100",
        location: Optional[str] = None
    ) -> dict:
        """Create user data dictionary."""
        return {
            "email": email or f"user{uuid.uuid4().hex[:8]}@househunt.app",
            "password": password,
            "name": name,
            "role": role,
            "phone": phone,
            "location": location
        }

    @staticmethod
    async def create_user(user_repo: UserRepository, **overrides) -> User:
        """Create a test user in the database."""
        return await user_repo.create_user(UserFactory.create_user_data(**overrides))


class ListingFactory:
    """Factory for creating test listings."""

    @staticmethod
    def create_listing_data(
        owner_id: uuid.UUID = None,
        title: str = "Test Listing",
        location: str = "Koramangala, Bangalore",
        price: Decimal = Decimal("6000.00"),
        bedrooms: int = 2,
        description: str = "A bright flat close to shops and transport",
        contact: str = "+1 555 0100",
        image_url: str = "https://via.placeholder.com/200",
        available: bool = True,
        created_at: Optional[datetime] = None
    ) -> dict:
        """Create listing data dictionary."""
        data = {
            "owner_id": owner_id,
            "title": title,
            "location": location,
            "price": price,
            "bedrooms": bedrooms,
            "description": description,
            "contact": contact,
            "image_url": image_url,
            "available": available
        }
        if created_at is not None:
            data["created_at"] = created_at
        return data

    @staticmethod
    async def create_listing(listing_repo: ListingRepository, owner_id: uuid.UUID, **overrides) -> Listing:
        """Create a test listing in the database."""
        return await listing_repo.create_listing(
            ListingFactory.create_listing_data(owner_id=owner_id, **overrides)
        )


def at(day: int, hour: int = 12) -> datetime:
    """Deterministic creation timestamp for ordering tests."""
    return datetime(2024, 1, day, hour, 0, 0, tzinfo=timezone.utc)


# User fixtures
@pytest.fixture
async def test_owner(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="owner@househunt.app",
        name="Olivia Owner",
        role=UserRole.OWNER
    )


@pytest.fixture
async def test_other_owner(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="second.owner@househunt.app",
        name="Oscar Owner",
        role=UserRole.OWNER
    )


@pytest.fixture
async def test_tenant(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="tenant@househunt.app",
        name="Tara Tenant",
        role=UserRole.TENANT,
        phone=None
    )


@pytest.fixture
async def test_listing(listing_repository: ListingRepository, test_owner: User) -> Listing:
    return await ListingFactory.create_listing(listing_repository, test_owner.id)


# Token helpers
def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner_headers(token_service: TokenService, test_owner: User) -> Dict[str, str]:
    return auth_headers(token_service.issue(test_owner.id))


@pytest.fixture
def other_owner_headers(token_service: TokenService, test_other_owner: User) -> Dict[str, str]:
    return auth_headers(token_service.issue(test_other_owner.id))


@pytest.fixture
def tenant_headers(token_service: TokenService, test_tenant: User) -> Dict[str, str]:
    return auth_headers(token_service.issue(test_tenant.id))
