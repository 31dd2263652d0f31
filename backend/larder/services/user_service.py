"""User Service — identity lookup, share-target resolution, and admin user management.

Invariants:
    - Role is read from storage on every lookup (no cached or hardcoded roles)
    - Only ADMIN may create users or change roles (can_manage_users)
    - resolve_users fails on ANY unknown id: a share set is never silently truncated
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from larder.core.domain_types import Principal, Role
from larder.core.enforce_roles import can_manage_users
from larder.core.errors import (
    ConflictError, ForbiddenError, InvalidInputError, ResourceNotFoundError,
)
from larder.models.user import User
from larder.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class UserService:
    """User lookups and role administration."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: UUID) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.name))
        return list(result.scalars().all())

    async def resolve_users(self, user_ids: list[UUID]) -> list[User]:
        """Load users for a share set, preserving request order, no duplicates."""
        unique_ids = list(dict.fromkeys(user_ids))
        if not unique_ids:
            return []
        result = await self.db.execute(
            select(User).where(User.id.in_(unique_ids)),
        )
        by_id = {u.id: u for u in result.scalars().all()}
        missing = [str(uid) for uid in unique_ids if uid not in by_id]
        if missing:
            raise InvalidInputError(
                f"Unknown user id(s): {', '.join(missing)}",
                field="shared_with_ids",
            )
        return [by_id[uid] for uid in unique_ids]

    async def create_user(self, principal: Principal, data: UserCreate) -> User:
        self._require_admin(principal)
        if await self._email_taken(data.email):
            raise _duplicate_email(data.email)
        user = User(name=data.name, email=data.email, role=data.role.value)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent create won the unique index on email
            await self.db.rollback()
            raise _duplicate_email(data.email)
        await self.db.refresh(user)
        logger.info(
            f"User created with role {user.role}",
            extra={"user_id": str(principal.id)},
        )
        return user

    async def set_role(
        self, principal: Principal, user_id: UUID, role: Role,
    ) -> User:
        self._require_admin(principal)
        user = await self.get(user_id)
        if not user:
            raise ResourceNotFoundError("User", str(user_id))
        user.role = Role(role).value
        await self.db.commit()
        logger.info(
            f"Role of {user_id} set to {user.role}",
            extra={"user_id": str(principal.id)},
        )
        return user

    async def _email_taken(self, email: str) -> bool:
        result = await self.db.execute(select(User.id).where(User.email == email))
        return result.first() is not None

    @staticmethod
    def _require_admin(principal: Principal) -> None:
        if not can_manage_users(principal.role):
            raise ForbiddenError("Managing users requires ADMIN")


def _duplicate_email(email: str) -> ConflictError:
    return ConflictError(f"User with email '{email}' already exists")
