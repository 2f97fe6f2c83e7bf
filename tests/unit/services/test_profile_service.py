"""
Unit tests for profile variant rules.
"""

from unittest.mock import AsyncMock

import pytest

from fitsocial.core.exceptions import (
    AlreadyExistsError,
    KindMismatchError,
    NoOpUpdateError,
    NotFoundError,
    ValidationError,
)
from fitsocial.models.profile import GymProfile, editable_profile_fields
from fitsocial.models.user import User, UserKind
from fitsocial.services.profile_service import ProfileService, parse_kind


@pytest.mark.unit
class TestProfileRules:
    def test_parse_kind(self):
        assert parse_kind("gym") == UserKind.GYM

        with pytest.raises(ValidationError) as exc_info:
            parse_kind("coach")
        assert exc_info.value.details["allowed"] == ["individual", "gym", "brand"]

    def test_score_fields_are_never_editable(self):
        fields = editable_profile_fields(UserKind.INDIVIDUAL)

        assert "activity_score" not in fields
        assert "last_activity_update" not in fields
        assert "user_id" not in fields
        assert "stats" in fields


@pytest.mark.unit
class TestProfileService:
    @pytest.fixture
    def service(self, mock_db, mock_invalidator):
        service = ProfileService(mock_db, invalidator=mock_invalidator)
        service.user_repo = AsyncMock()
        service.profile_repo = AsyncMock()
        service.profile_repo.exists_any = AsyncMock(return_value=False)
        return service

    @pytest.mark.asyncio
    async def test_kind_mismatch_writes_nothing(self, service, mock_db):
        service.user_repo.get = AsyncMock(return_value=User(id=1, kind=UserKind.GYM))

        with pytest.raises(KindMismatchError):
            await service.create_profile(1, "individual", {"stats": {}})

        service.profile_repo.create.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_second_profile_rejected(self, service):
        service.user_repo.get = AsyncMock(return_value=User(id=1, kind=UserKind.BRAND))
        service.profile_repo.exists_any = AsyncMock(return_value=True)

        with pytest.raises(AlreadyExistsError):
            await service.create_profile(1, "brand", {})

    @pytest.mark.asyncio
    async def test_individual_starts_at_zero(self, service, mock_db):
        service.user_repo.get = AsyncMock(return_value=User(id=1, kind=UserKind.INDIVIDUAL))
        service.profile_repo.create = AsyncMock(return_value=AsyncMock(id=5))

        profile_id = await service.create_profile(
            1, "individual", {"affiliation": "Ironworks", "activity_score": 999}
        )

        assert profile_id == 5
        kind, user_id, fields = service.profile_repo.create.call_args[0]
        assert kind == UserKind.INDIVIDUAL
        assert fields["activity_score"] == 0
        assert fields["affiliation"] == "Ironworks"
        assert fields["last_activity_update"] is not None

    @pytest.mark.asyncio
    async def test_new_individual_clears_cached_leaderboards(self, service, mock_invalidator):
        service.user_repo.get = AsyncMock(return_value=User(id=1, kind=UserKind.INDIVIDUAL))
        service.profile_repo.create = AsyncMock(return_value=AsyncMock(id=5))

        await service.create_profile(1, "individual", {})

        mock_invalidator.invalidate_for_event.assert_awaited_once_with("score_changed")

    @pytest.mark.asyncio
    async def test_other_kinds_leave_leaderboards_cached(self, service, mock_invalidator):
        service.user_repo.get = AsyncMock(return_value=User(id=1, kind=UserKind.GYM))
        service.profile_repo.create = AsyncMock(return_value=AsyncMock(id=6))

        await service.create_profile(1, "gym", {"amenities": ["sauna"]})

        mock_invalidator.invalidate_for_event.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_create_leaves_leaderboards_cached(self, service, mock_invalidator):
        service.user_repo.get = AsyncMock(return_value=User(id=1, kind=UserKind.GYM))

        with pytest.raises(KindMismatchError):
            await service.create_profile(1, "individual", {})

        mock_invalidator.invalidate_for_event.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_without_profile(self, service):
        service.user_repo.get = AsyncMock(return_value=User(id=1, kind=None))

        with pytest.raises(NotFoundError):
            await service.update_profile(1, {"amenities": ["sauna"]})

    @pytest.mark.asyncio
    async def test_update_with_only_protected_fields_is_noop(self, service, mock_db):
        service.user_repo.get = AsyncMock(return_value=User(id=1, kind=UserKind.GYM))
        service.profile_repo.get_by_user = AsyncMock(return_value=GymProfile(user_id=1))

        with pytest.raises(NoOpUpdateError):
            await service.update_profile(
                1, {"user_id": 9, "created_at": "now", "amenities": None, "unknown": 1}
            )

        service.profile_repo.apply_updates.assert_not_called()
        mock_db.commit.assert_not_called()
