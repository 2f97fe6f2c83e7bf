"""
Profile Service - Business logic for the three profile variants.

A user's kind tag decides which variant table is read or written; the tag is
never inferred from the payload's fields.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.core.cache import CacheInvalidator, cache_invalidator
from fitsocial.core.exceptions import (
    AlreadyExistsError,
    KindMismatchError,
    NoOpUpdateError,
    NotFoundError,
    ValidationError,
)
from fitsocial.models.profile import Profile, editable_profile_fields
from fitsocial.models.user import User, UserKind
from fitsocial.repositories.profile_repository import ProfileRepository
from fitsocial.repositories.user_repository import UserRepository
from fitsocial.services.base import BaseService


def parse_kind(kind: Any) -> UserKind:
    try:
        return UserKind(kind)
    except ValueError:
        raise ValidationError(
            f"Unknown user kind: {kind}",
            details={"allowed": [k.value for k in UserKind]},
        )


class ProfileService(BaseService):
    """
    Profile creation, partial update and lookup.

    Business rules:
    1. A profile's variant must equal the owner's kind
    2. A user owns at most one profile
    3. Updates never touch identity or score fields
    """

    def __init__(
        self, db: AsyncSession, invalidator: Optional[CacheInvalidator] = None
    ):
        super().__init__(db)
        self.user_repo = UserRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.invalidator = invalidator or cache_invalidator

    async def create_profile(
        self, user_id: int, kind: Any, payload: Dict[str, Any]
    ) -> int:
        """
        Create the profile matching the user's kind.

        Returns:
            The new profile id

        Raises:
            NotFoundError: If the user does not exist
            KindMismatchError: If kind differs from the user's kind
            AlreadyExistsError: If the user already has a profile
        """
        self._log_operation("create_profile", user_id=user_id, kind=kind)

        try:
            user = await self.user_repo.get(user_id)
            if not user:
                raise NotFoundError("User not found")

            profile_kind = parse_kind(kind)
            profile = await self.stage_profile(user, profile_kind, payload)
            await self.db.commit()

        except IntegrityError:
            await self.db.rollback()
            raise AlreadyExistsError("Profile already exists for this user")
        except Exception as error:
            await self._handle_service_error(error, "create profile")

        await self.profile_created(profile_kind)
        return profile.id

    async def profile_created(self, kind: UserKind) -> None:
        """A new individual joins the ranking, so cached boards are stale."""
        if kind == UserKind.INDIVIDUAL:
            await self.invalidator.invalidate_for_event("score_changed")

    async def stage_profile(
        self, user: User, kind: UserKind, payload: Dict[str, Any]
    ) -> Profile:
        """
        Validate and flush a new profile without committing.

        Shared with onboarding so the kind assignment and the profile insert
        land in the caller's transaction.
        """
        if user.kind != kind:
            raise KindMismatchError(
                user.kind.value if user.kind else None, kind.value
            )

        if await self.profile_repo.exists_any(user.id):
            raise AlreadyExistsError("Profile already exists for this user")

        allowed = editable_profile_fields(kind)
        fields = {key: value for key, value in payload.items() if key in allowed}

        if kind == UserKind.INDIVIDUAL:
            fields["activity_score"] = 0
            fields["last_activity_update"] = datetime.now(timezone.utc)

        return await self.profile_repo.create(kind, user.id, fields)

    async def update_profile(self, user_id: int, updates: Dict[str, Any]) -> bool:
        """
        Shallow-merge updates into the user's profile.

        None values, protected fields and fields the variant does not have
        are dropped; each remaining field is replaced wholesale.

        Raises:
            NotFoundError: If the user has no profile
            NoOpUpdateError: If nothing remains after filtering
        """
        self._log_operation("update_profile", user_id=user_id, fields=list(updates))

        try:
            user = await self.user_repo.get(user_id)
            if not user or user.kind is None:
                raise NotFoundError("Profile not found")

            profile = await self.profile_repo.get_by_user(user.kind, user_id)
            if not profile:
                raise NotFoundError("Profile not found")

            allowed = editable_profile_fields(user.kind)
            filtered = {
                key: value
                for key, value in updates.items()
                if value is not None and key in allowed
            }
            if not filtered:
                raise NoOpUpdateError()

            await self.profile_repo.apply_updates(profile, filtered)
            await self.db.commit()
            return True

        except Exception as error:
            await self._handle_service_error(error, "update profile")

    async def get_profile(self, user_id: int) -> Optional[Profile]:
        """The profile variant matching the user's kind, or None."""
        user = await self.user_repo.get(user_id)
        if not user or user.kind is None:
            return None
        return await self.profile_repo.get_by_user(user.kind, user_id)

    async def list_trainers(self, limit: int = 20) -> List[Dict[str, Any]]:
        return await self.profile_repo.list_trainers(limit=limit)
