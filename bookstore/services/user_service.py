"""
Business logic for users.

``UserService`` wraps the ORM calls for the ``users`` table and issues
access tokens. Password hashing and the duplicate-email pre-check happen
in the route layer; this service only stores what it is given.
"""

from datetime import timedelta
from typing import Any, Optional
from uuid import uuid4

from loguru import logger
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.exceptions import DuplicateEmailError
from bookstore.security import (
    create_access_token,
    ALGORITHM,
    ACCESS_TOKEN_EXPIRE_MINUTES,
)
from bookstore.storage.models import User, utcnow

# Columns a caller may change through update_user
UPDATABLE_FIELDS = ("email", "name", "password")


class UserService:
    """
    CRUD over users plus token issuing.

    Usage:
        service = UserService(session, secret_key="dev")
        user = await service.create_user("a@b.com", "Ana", hashed)
        token = service.issue_token(user.email)
    """

    def __init__(
        self,
        session: AsyncSession,
        secret_key: str,
        algorithm: str = ALGORITHM,
        token_expire_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES,
    ):
        self.session = session
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.token_expire_minutes = token_expire_minutes

    async def list_users(self) -> list[User]:
        """Return every user."""
        result = await self.session.execute(select(User))
        return list(result.scalars().all())

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Return the user with the given id, or None."""
        return await self.session.get(User, user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Return the user registered with ``email``, or None."""
        stmt = select(User).where(User.email == email)
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def create_user(self, email: str, name: str, password_hash: str) -> User:
        """
        Persist a new user.

        Args:
            email: Account email. Callers check uniqueness first.
            name: Display name.
            password_hash: Already-hashed password.

        Returns:
            The stored user, including its generated id.

        Raises:
            DuplicateEmailError: If the email was registered concurrently
                between the caller's check and this insert.
        """
        user = User(
            id=str(uuid4()),
            email=email,
            name=name,
            password=password_hash,
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.warning(f"Unique constraint hit while registering {email}")
            raise DuplicateEmailError(email)

        await self.session.refresh(user)
        logger.info(f"Registered user {user.id} ({email})")
        return user

    async def update_user(self, user_id: str, changes: dict[str, Any]) -> Optional[User]:
        """
        Merge ``changes`` into an existing user.

        A ``password`` entry must already be hashed. Unknown keys are ignored.

        Returns:
            The updated user, or None if no user has that id.
        """
        user = await self.get_user_by_id(user_id)
        if user is None:
            return None

        for key, value in changes.items():
            if key in UPDATABLE_FIELDS:
                setattr(user, key, value)
        user.updated_at = utcnow()

        await self.session.commit()
        await self.session.refresh(user)
        logger.info(f"Updated user {user_id}: {sorted(k for k in changes if k in UPDATABLE_FIELDS)}")
        return user

    async def delete_user(self, user_id: str) -> bool:
        """Delete a user. Returns True if a row was removed."""
        result = await self.session.execute(delete(User).where(User.id == user_id))
        await self.session.commit()
        return result.rowcount > 0

    def issue_token(self, email: str) -> dict[str, str]:
        """Sign a short-lived token carrying the email in the ``user`` claim."""
        token = create_access_token(
            {"user": {"email": email}},
            secret_key=self.secret_key,
            algorithm=self.algorithm,
            expires_delta=timedelta(minutes=self.token_expire_minutes),
        )
        return {"token": token}
