"""
User API Routes

Handles:
- Signup (duplicate-email check, password hashing)
- Login (token generation)
- User CRUD
- Current user retrieval

Unexpected failures are not caught here; the application-level handler
turns them into a generic 500.
"""

from fastapi import APIRouter, Depends, Response, status
from loguru import logger

from bookstore.api.dependencies import get_user_service, get_current_user
from bookstore.api.schemas import (
    UserCreate,
    UserUpdate,
    UserCreated,
    UserResponse,
    LoginRequest,
    TokenResponse,
    MessageResponse,
)
from bookstore.exceptions import (
    NotFoundError,
    DuplicateEmailError,
    InvalidCredentialsError,
)
from bookstore.security import hash_password, verify_password
from bookstore.services import UserService
from bookstore.storage.models import User

router = APIRouter(prefix="/users", tags=["users"])

USER_NOT_FOUND = "User not found"


@router.post(
    "",
    response_model=UserCreated,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": MessageResponse, "description": "User already exists"},
    },
)
async def create_user(
    user: UserCreate,
    users: UserService = Depends(get_user_service),
):
    """Register a new user."""
    if await users.get_user_by_email(user.email):
        logger.info(f"Signup rejected, email already registered: {user.email}")
        raise DuplicateEmailError(user.email)

    created = await users.create_user(
        email=user.email,
        name=user.name,
        password_hash=hash_password(user.password),
    )
    return UserCreated(id=created.id, email=created.email)


@router.get("", response_model=list[UserResponse])
async def list_users(users: UserService = Depends(get_user_service)):
    """List all users."""
    return await users.list_users()


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        401: {"model": MessageResponse, "description": "Invalid credentials"},
        404: {"model": MessageResponse, "description": "User not found"},
    },
)
async def login(
    body: LoginRequest,
    users: UserService = Depends(get_user_service),
):
    """Exchange email and password for a short-lived access token."""
    user = await users.get_user_by_email(body.email)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)

    if not verify_password(body.password, user.password):
        logger.info(f"Failed login for {body.email}")
        raise InvalidCredentialsError()

    return users.issue_token(user.email)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={
        401: {"model": MessageResponse, "description": "Invalid or expired token"},
    },
)
async def read_current_user(current_user: User = Depends(get_current_user)):
    """Get the profile of the token's owner."""
    return current_user


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={
        404: {"model": MessageResponse, "description": "User not found"},
    },
)
async def get_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
):
    """Get a user by ID."""
    user = await users.get_user_by_id(user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)
    return user


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        404: {"model": MessageResponse, "description": "User not found"},
    },
)
async def delete_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
):
    """Delete a user. Irreversible."""
    if not await users.delete_user(user_id):
        raise NotFoundError(USER_NOT_FOUND)
    logger.info(f"Deleted user {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={
        404: {"model": MessageResponse, "description": "User not found"},
    },
)
async def update_user(
    user_id: str,
    user: UserUpdate,
    users: UserService = Depends(get_user_service),
):
    """
    Update a user.

    Supports partial updates. A new password is hashed before it is stored.
    """
    if await users.get_user_by_id(user_id) is None:
        raise NotFoundError(USER_NOT_FOUND)

    changes = {k: v for k, v in user.model_dump(exclude_unset=True).items() if v is not None}
    if "password" in changes:
        changes["password"] = hash_password(changes["password"])

    updated = await users.update_user(user_id, changes)
    if updated is None:
        raise NotFoundError(USER_NOT_FOUND)
    return updated
