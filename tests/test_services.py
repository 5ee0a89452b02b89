"""
Tests for service classes.
Tests token handling, authentication flows, role checks and listing business rules.
"""

import pytest
import uuid
from datetime import timedelta
from decimal import Decimal
from jose import jwt

from househunt.models.user import User, UserRole
from househunt.models.listing import Listing
from househunt.repositories.listing import ListingRepository, ListingSearchFilters
from househunt.services.auth import AuthService
from househunt.services.listing import ListingService
from househunt.services.token import TokenService
from househunt.schemas.user import UserCreate
from househunt.schemas.listing import ListingCreate, ListingUpdate
from househunt.utils.auth import ensure_role
from househunt.utils.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    InsufficientRoleError,
    DuplicateResourceError,
    ListingNotFoundError,
    ListingOwnershipError,
    ValidationError
)
from tests.conftest import ListingFactory, TEST_PASSWORD


class TestTokenService:
    """Test TokenService issue and verify."""

    def test_issue_and_verify(self, token_service: TokenService):
        user_id = uuid.uuid4()

        token = token_service.issue(user_id)

        assert token_service.verify(token) == user_id

    def test_expired_token_rejected(self, token_service: TokenService):
        token = token_service.issue(uuid.uuid4(), expires_delta=timedelta(seconds=-1))

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_token_signed_with_other_secret_rejected(self, token_service: TokenService):
        other = TokenService(secret_key="another-secret-key-that-is-long-enough-000")

        with pytest.raises(InvalidTokenError):
            token_service.verify(other.issue(uuid.uuid4()))

    @pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
    def test_malformed_token_rejected(self, token_service: TokenService, token: str):
        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_token_without_expiry_rejected(self, token_service: TokenService):
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "type": "access"},
            token_service.secret_key,
            algorithm=token_service.algorithm
        )

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_token_with_bad_subject_rejected(self, token_service: TokenService):
        token = jwt.encode(
            {"sub": "not-a-uuid", "type": "access", "exp": 4102444800},
            token_service.secret_key,
            algorithm=token_service.algorithm
        )

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_expires_in(self):
        service = TokenService(secret_key="x" * 40, expire_minutes=30)

        assert service.expires_in == 1800

    def test_secret_required(self):
        with pytest.raises(ValueError):
            TokenService(secret_key="")


class TestRoleGate:
    """Test ensure_role against every role pairing."""

    @pytest.mark.parametrize("user_role", list(UserRole))
    @pytest.mark.parametrize("required_role", list(UserRole))
    def test_ensure_role(self, user_role: UserRole, required_role: UserRole):
        user = User(id=uuid.uuid4(), role=user_role)

        if user_role == required_role:
            assert ensure_role(user, required_role) is user
        else:
            with pytest.raises(InsufficientRoleError) as exc_info:
                ensure_role(user, required_role)
            assert exc_info.value.status_code == 403
            assert exc_info.value.detail == f"Access denied. {required_role.value.capitalize()} role required."


class TestAuthService:
    """Test AuthService functionality."""

    @pytest.mark.asyncio
    async def test_register(self, auth_service: AuthService, token_service: TokenService):
        user_data = UserCreate(
            name="Nina Newcomer",
            email="nina@househunt.app",
            password="password123",
            role=UserRole.OWNER
        )

        user, token = await auth_service.register(user_data)

        assert user.role == UserRole.OWNER
        assert token_service.verify(token) == user.id

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, auth_service: AuthService, test_owner: User):
        user_data = UserCreate(name="Copy Cat", email=test_owner.email, password="password123")

        with pytest.raises(DuplicateResourceError):
            await auth_service.register(user_data)

    @pytest.mark.asyncio
    async def test_login(self, auth_service: AuthService, token_service: TokenService, test_owner: User):
        user, token = await auth_service.login(test_owner.email, TEST_PASSWORD)

        assert user.id == test_owner.id
        assert token_service.verify(token) == test_owner.id

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, auth_service: AuthService, test_owner: User):
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(test_owner.email, "wrongpassword1")

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, auth_service: AuthService):
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login("nobody@househunt.app", TEST_PASSWORD)

    @pytest.mark.asyncio
    async def test_get_current_user(self, auth_service: AuthService, token_service: TokenService, test_tenant: User):
        user = await auth_service.get_current_user(token_service.issue(test_tenant.id))

        assert user.id == test_tenant.id

    @pytest.mark.asyncio
    async def test_get_current_user_expired_token(self, auth_service: AuthService, token_service: TokenService, test_tenant: User):
        token = token_service.issue(test_tenant.id, expires_delta=timedelta(seconds=-5))

        with pytest.raises(InvalidTokenError):
            await auth_service.get_current_user(token)

    @pytest.mark.asyncio
    async def test_get_current_user_unknown_subject(self, auth_service: AuthService, token_service: TokenService):
        with pytest.raises(InvalidTokenError) as exc_info:
            await auth_service.get_current_user(token_service.issue(uuid.uuid4()))

        assert exc_info.value.detail == "Token is not valid"

    @pytest.mark.asyncio
    async def test_change_password(self, auth_service: AuthService, test_owner: User):
        await auth_service.change_password(test_owner, TEST_PASSWORD, "newpassword456")

        user, _ = await auth_service.login(test_owner.email, "newpassword456")
        assert user.id == test_owner.id

    @pytest.mark.asyncio
    async def test_change_password_wrong_current(self, auth_service: AuthService, test_owner: User):
        with pytest.raises(InvalidCredentialsError):
            await auth_service.change_password(test_owner, "wrongpassword1", "newpassword456")

    @pytest.mark.asyncio
    async def test_change_password_unchanged(self, auth_service: AuthService, test_owner: User):
        with pytest.raises(ValidationError):
            await auth_service.change_password(test_owner, TEST_PASSWORD, TEST_PASSWORD)


class TestListingService:
    """Test ListingService business rules."""

    def _create_payload(self, **overrides) -> ListingCreate:
        data = {
            "title": "Two bed flat",
            "location": "Whitefield, Bangalore",
            "price": Decimal("8000"),
            "bedrooms": 2,
            "description": "Close to the tech park",
            "contact": "+1 555 0199"
        }
        data.update(overrides)
        return ListingCreate(**data)

    @pytest.mark.asyncio
    async def test_create_listing_assigns_owner_and_placeholder(self, listing_service: ListingService, test_owner: User):
        listing = await listing_service.create_listing(self._create_payload(), test_owner)

        assert listing.owner_id == test_owner.id
        assert listing.available is True
        assert listing.image_url == listing_service.default_image_url

    @pytest.mark.asyncio
    async def test_create_listing_keeps_image_url(self, listing_service: ListingService, test_owner: User):
        listing = await listing_service.create_listing(
            self._create_payload(image_url="https://img.househunt.app/flat.jpg"),
            test_owner
        )

        assert listing.image_url == "https://img.househunt.app/flat.jpg"

    @pytest.mark.asyncio
    async def test_create_listing_tenant_forbidden(self, listing_service: ListingService, test_tenant: User):
        with pytest.raises(InsufficientRoleError):
            await listing_service.create_listing(self._create_payload(), test_tenant)

    @pytest.mark.asyncio
    async def test_list_listings_is_idempotent(
        self,
        listing_service: ListingService,
        listing_repository: ListingRepository,
        test_owner: User,
        test_tenant: User
    ):
        for i in range(3):
            await ListingFactory.create_listing(listing_repository, test_owner.id, title=f"Listing {i}")

        first = await listing_service.list_listings(test_tenant)
        second = await listing_service.list_listings(test_tenant)

        assert [listing.id for listing in first] == [listing.id for listing in second]
        assert len(first) == 3

    @pytest.mark.asyncio
    async def test_price_range_example(
        self,
        listing_service: ListingService,
        listing_repository: ListingRepository,
        test_owner: User,
        test_tenant: User
    ):
        for price in ("4000", "6000", "11000"):
            await ListingFactory.create_listing(listing_repository, test_owner.id, price=Decimal(price))

        filters = ListingSearchFilters(min_price=Decimal("5000"), max_price=Decimal("10000"))
        results = await listing_service.list_listings(test_tenant, filters)

        assert [float(listing.price) for listing in results] == [6000.0]

    @pytest.mark.asyncio
    async def test_my_listings_tenant_forbidden(self, listing_service: ListingService, test_tenant: User):
        with pytest.raises(InsufficientRoleError):
            await listing_service.my_listings(test_tenant)

    @pytest.mark.asyncio
    async def test_get_listing(self, listing_service: ListingService, test_listing: Listing):
        listing = await listing_service.get_listing(str(test_listing.id))

        assert listing.id == test_listing.id
        assert listing.owner is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("listing_id", ["not-a-uuid", "12345", str(uuid.UUID(int=0))])
    async def test_get_listing_not_found(self, listing_service: ListingService, listing_id: str):
        with pytest.raises(ListingNotFoundError):
            await listing_service.get_listing(listing_id)

    @pytest.mark.asyncio
    async def test_update_listing_by_owner(self, listing_service: ListingService, test_listing: Listing, test_owner: User):
        updated = await listing_service.update_listing(
            str(test_listing.id),
            ListingUpdate(price=Decimal("9000"), available=False),
            test_owner
        )

        assert float(updated.price) == 9000.0
        assert updated.available is False
        assert updated.title == "Test Listing"
        assert updated.owner_id == test_owner.id

    @pytest.mark.asyncio
    async def test_update_listing_by_other_owner(
        self,
        listing_service: ListingService,
        test_listing: Listing,
        test_other_owner: User
    ):
        with pytest.raises(ListingOwnershipError):
            await listing_service.update_listing(str(test_listing.id), ListingUpdate(title="Hijacked"), test_other_owner)

        unchanged = await listing_service.get_listing(str(test_listing.id))
        assert unchanged.title == "Test Listing"

    @pytest.mark.asyncio
    async def test_update_listing_by_tenant(self, listing_service: ListingService, test_listing: Listing, test_tenant: User):
        with pytest.raises(InsufficientRoleError):
            await listing_service.update_listing(str(test_listing.id), ListingUpdate(title="Nope"), test_tenant)

    @pytest.mark.asyncio
    async def test_update_missing_listing(self, listing_service: ListingService, test_owner: User):
        with pytest.raises(ListingNotFoundError):
            await listing_service.update_listing(str(uuid.uuid4()), ListingUpdate(title="Ghost"), test_owner)

    @pytest.mark.asyncio
    async def test_update_with_no_fields_is_noop(self, listing_service: ListingService, test_listing: Listing, test_owner: User):
        listing = await listing_service.update_listing(str(test_listing.id), ListingUpdate(), test_owner)

        assert listing.id == test_listing.id
        assert listing.title == test_listing.title

    @pytest.mark.asyncio
    async def test_last_write_wins(self, listing_service: ListingService, test_listing: Listing, test_owner: User):
        await listing_service.update_listing(str(test_listing.id), ListingUpdate(title="First"), test_owner)
        await listing_service.update_listing(str(test_listing.id), ListingUpdate(title="Second"), test_owner)

        assert (await listing_service.get_listing(str(test_listing.id))).title == "Second"

    @pytest.mark.asyncio
    async def test_delete_listing(self, listing_service: ListingService, test_listing: Listing, test_owner: User):
        await listing_service.delete_listing(str(test_listing.id), test_owner)

        with pytest.raises(ListingNotFoundError):
            await listing_service.get_listing(str(test_listing.id))

    @pytest.mark.asyncio
    async def test_delete_listing_by_other_owner(
        self,
        listing_service: ListingService,
        test_listing: Listing,
        test_other_owner: User
    ):
        with pytest.raises(ListingOwnershipError):
            await listing_service.delete_listing(str(test_listing.id), test_other_owner)

        assert await listing_service.get_listing(str(test_listing.id)) is not None
