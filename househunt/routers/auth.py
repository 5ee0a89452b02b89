"""
Authentication API endpoints for registration, login and the current user's profile.
"""

from fastapi import APIRouter, Depends, status
from househunt.models.user import User
from househunt.services.auth import AuthService
from househunt.schemas.auth import (
    LoginRequest,
    CurrentUserResponse,
    AuthResponse
)
from househunt.schemas.user import UserCreate, UserProfileUpdate, PasswordChangeRequest
from househunt.schemas.listing import MessageResponse
from househunt.schemas.error import get_common_error_responses
from househunt.utils.dependencies import get_auth_service, get_current_user


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(user: User, access_token: str, auth_service: AuthService) -> AuthResponse:
    return AuthResponse(
        user=CurrentUserResponse.model_validate(user.to_dict()),
        access_token=access_token,
        token_type="bearer",
        expires_in=auth_service.token_service.expires_in
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an owner or tenant account and return an access token",
    responses={409: {"description": "Email already registered"}}
)
async def register(
    user_data: UserCreate,
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    """
    Register a new user.

    Raises:
        DuplicateResourceError: If the email is already registered
    """
    user, access_token = await auth_service.register(user_data)
    return _auth_response(user, access_token, auth_service)


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate user with email and password, returns a JWT access token",
    responses=get_common_error_responses()
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    """
    Authenticate user and return an access token.

    Raises:
        InvalidCredentialsError: If credentials are invalid
    """
    user, access_token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )
    return _auth_response(user, access_token, auth_service)


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current user",
    description="Get current authenticated user information",
    responses=get_common_error_responses()
)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
) -> CurrentUserResponse:
    return CurrentUserResponse.model_validate(current_user.to_dict())


@router.put(
    "/me",
    response_model=CurrentUserResponse,
    status_code=status.HTTP_200_OK,
    summary="Update profile",
    description="Update the current user's location",
    responses=get_common_error_responses()
)
async def update_current_user(
    profile_data: UserProfileUpdate,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> CurrentUserResponse:
    user = current_user
    # Omitted fields are left alone; an explicit null clears the location
    if "location" in profile_data.model_fields_set:
        user = await auth_service.update_location(current_user, profile_data.location)
    return CurrentUserResponse.model_validate(user.to_dict())


@router.post(
    "/change-password",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Change password",
    description="Replace the current user's password after verifying the current one",
    responses=get_common_error_responses()
)
async def change_password(
    password_data: PasswordChangeRequest,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    """
    Change the current user's password.

    Raises:
        InvalidCredentialsError: If the current password is incorrect
    """
    await auth_service.change_password(
        current_user,
        password_data.current_password,
        password_data.new_password
    )
    return MessageResponse(message="Password updated successfully")
