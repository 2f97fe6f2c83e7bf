"""
User Service - Business logic for user identity.

This provides:
1. First sign-in provisioning keyed by the identity-provider subject
2. Username derivation
3. Onboarding (kind assignment plus profile creation)
4. Lookup and search
"""

import re
import time
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.core.cache import CacheInvalidator
from fitsocial.core.exceptions import ConflictError, KindMismatchError, NotFoundError
from fitsocial.models.user import User
from fitsocial.repositories.user_repository import UserRepository
from fitsocial.services.base import BaseService
from fitsocial.services.profile_service import ProfileService, parse_kind

ONBOARDING_USER_FIELDS = ("bio", "avatar_url")


def derive_username(name: Optional[str]) -> str:
    """Lower-cased display name with whitespace removed, or user_<millis>."""
    base = re.sub(r"\s+", "", (name or "").lower())
    return base or f"user_{int(time.time() * 1000)}"


class UserService(BaseService):
    """
    User service handling identity-related business logic.

    The service coordinates the user and profile repositories so that
    onboarding is a single transaction.
    """

    def __init__(
        self, db: AsyncSession, invalidator: Optional[CacheInvalidator] = None
    ):
        super().__init__(db)
        self.user_repo = UserRepository(db)
        self.profile_service = ProfileService(db, invalidator)

    async def get_or_create_user(
        self,
        external_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> User:
        """
        Return the user for an identity-provider subject, creating it on
        first sign-in.

        Exactly one user exists per external_id: a concurrent first sign-in
        that loses the unique constraint returns the winner's row.
        """
        existing = await self.user_repo.get_by_external_id(external_id)
        if existing:
            return existing

        self._log_operation("create_user", external_id=external_id)

        try:
            username = await self._unique_username(derive_username(name))
            user = await self.user_repo.create(
                {
                    "external_id": external_id,
                    "email": email or "",
                    "username": username,
                    "avatar_url": avatar_url,
                }
            )
            await self.db.commit()
            self.logger.info(f"Created user {user.id} for subject {external_id}")
            return user

        except IntegrityError:
            await self.db.rollback()
            winner = await self.user_repo.get_by_external_id(external_id)
            if winner:
                return winner
            raise ConflictError("Username already taken, retry sign-in")
        except Exception as error:
            await self._handle_service_error(error, "create user")

    async def _unique_username(self, base: str) -> str:
        candidate = base
        suffix = 1
        while await self.user_repo.username_exists(candidate):
            candidate = f"{base}{suffix}"
            suffix += 1
        return candidate

    async def get_user(self, user_id: int) -> User:
        user = await self.user_repo.get(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def get_user_by_username(self, username: str) -> User:
        user = await self.user_repo.get_by_username(username)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def search_users(
        self, query: str, skip: int = 0, limit: int = 20, kind: Any = None
    ) -> List[User]:
        """Users matching the term, optionally narrowed to one kind."""
        query = (query or "").strip()
        if not query:
            return []
        return await self.user_repo.search_users(
            query,
            skip=skip,
            limit=limit,
            kind=parse_kind(kind) if kind is not None else None,
        )

    async def complete_onboarding(
        self,
        user_id: int,
        kind: Any,
        payload: Dict[str, Any],
        user_fields: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Assign the user's kind and create the matching profile atomically.

        Args:
            user_id: User being onboarded
            kind: individual, gym or brand
            payload: Profile fields for the chosen variant
            user_fields: Optional bio / avatar_url

        Raises:
            NotFoundError: If the user does not exist
            KindMismatchError: If the user already has a different kind
            AlreadyExistsError: If the user already has a profile
        """
        self._log_operation("complete_onboarding", user_id=user_id, kind=kind)

        try:
            kind = parse_kind(kind)
            user = await self.user_repo.get(user_id)
            if not user:
                raise NotFoundError("User not found")

            if user.kind is not None and user.kind != kind:
                raise KindMismatchError(user.kind.value, kind.value)

            user.kind = kind
            for field in ONBOARDING_USER_FIELDS:
                value = (user_fields or {}).get(field)
                if value is not None:
                    setattr(user, field, value)
            await self.db.flush()

            profile = await self.profile_service.stage_profile(user, kind, payload)
            user.onboarding_complete = True

            await self.db.commit()
            await self.db.refresh(user)

        except Exception as error:
            await self._handle_service_error(error, "complete onboarding")

        await self.profile_service.profile_created(kind)
        return {"user": user, "profile": profile}

    async def get_user_with_profile(self, user_id: int) -> Dict[str, Any]:
        """
        User plus the profile variant named by its kind tag.

        Returns:
            {"user": User, "profile": Profile or None}
        """
        user = await self.get_user(user_id)
        profile = await self.profile_service.get_profile(user_id)
        return {"user": user, "profile": profile}
