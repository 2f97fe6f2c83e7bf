"""
Integration tests for sign-in provisioning, onboarding and profile edits.
"""

import pytest
from sqlalchemy import func, select

from fitsocial.core.exceptions import AlreadyExistsError, KindMismatchError, ValidationError
from fitsocial.models.profile import GymProfile, IndividualProfile
from fitsocial.models.user import User, UserKind
from fitsocial.services.profile_service import ProfileService
from fitsocial.services.user_service import UserService


async def _count(session, model):
    result = await session.execute(select(func.count(model.id)))
    return result.scalar()


@pytest.mark.integration
class TestSignIn:
    @pytest.mark.asyncio
    async def test_first_sign_in_is_idempotent(self, db_session):
        service = UserService(db_session)

        first = await service.get_or_create_user("auth0|1", "ann@example.com", "Ann Lee")
        again = await service.get_or_create_user("auth0|1", "other@example.com", "Someone")

        assert first.id == again.id
        assert first.username == "annlee"
        assert first.kind is None
        assert await _count(db_session, User) == 1

    @pytest.mark.asyncio
    async def test_colliding_usernames_get_a_suffix(self, db_session):
        service = UserService(db_session)

        first = await service.get_or_create_user("auth0|1", None, "Ann Lee")
        second = await service.get_or_create_user("auth0|2", None, "ann lee")

        assert first.username == "annlee"
        assert second.username == "annlee1"

    @pytest.mark.asyncio
    async def test_missing_name_falls_back_to_generated_username(self, db_session):
        user = await UserService(db_session).get_or_create_user("auth0|3")

        assert user.username.startswith("user_")


@pytest.mark.integration
class TestOnboarding:
    @pytest.mark.asyncio
    async def test_individual_onboarding(self, db_session, factory):
        user = await factory.user("newcomer")

        result = await UserService(db_session).complete_onboarding(
            user.id,
            "individual",
            {"stats": {"height": 180}, "activity_score": 500},
            {"bio": "Early riser"},
        )

        assert result["user"].kind == UserKind.INDIVIDUAL
        assert result["user"].onboarding_complete is True
        assert result["user"].bio == "Early riser"
        assert result["profile"].stats == {"height": 180}
        assert result["profile"].activity_score == 0

    @pytest.mark.asyncio
    async def test_kind_mismatch_writes_nothing(self, db_session, factory):
        user = await factory.user("gymowner", kind=UserKind.GYM)
        user_id = user.id

        with pytest.raises(KindMismatchError):
            await UserService(db_session).complete_onboarding(user_id, "individual", {})

        stored = await db_session.get(User, user_id)
        await db_session.refresh(stored)
        assert stored.kind == UserKind.GYM
        assert await _count(db_session, IndividualProfile) == 0

    @pytest.mark.asyncio
    async def test_second_profile_rejected(self, db_session, factory):
        gym = await factory.gym("ironworks")
        gym_id = gym.id

        with pytest.raises(AlreadyExistsError):
            await UserService(db_session).complete_onboarding(
                gym_id, "gym", {"amenities": ["sauna"]}
            )

        assert await _count(db_session, GymProfile) == 1

    @pytest.mark.asyncio
    async def test_create_profile_requires_a_kind(self, db_session, factory):
        user = await factory.user("undecided")
        user_id = user.id

        with pytest.raises(KindMismatchError):
            await ProfileService(db_session).create_profile(user_id, "individual", {})

        assert await _count(db_session, IndividualProfile) == 0


@pytest.mark.integration
class TestProfileUpdates:
    @pytest.mark.asyncio
    async def test_top_level_fields_are_replaced_wholesale(self, db_session, factory):
        user = await factory.individual(
            "lifter", score=40, stats={"height": 180, "weight": 80}
        )
        service = ProfileService(db_session)

        await service.update_profile(
            user.id, {"stats": {"weight": 78}, "activity_score": 9000, "affiliation": None}
        )

        profile = await service.get_profile(user.id)
        await db_session.refresh(profile)
        assert profile.stats == {"weight": 78}
        assert profile.activity_score == 40

    @pytest.mark.asyncio
    async def test_profile_follows_the_kind_tag(self, db_session, factory):
        gym = await factory.gym("ironworks")
        brand = await factory.brand("shoeco")
        service = ProfileService(db_session)

        assert isinstance(await service.get_profile(gym.id), GymProfile)
        assert (await service.get_profile(brand.id)).user_id == brand.id

        undecided = await factory.user("undecided")
        assert await service.get_profile(undecided.id) is None

    @pytest.mark.asyncio
    async def test_trainer_listing(self, db_session, factory):
        await factory.individual("coach", is_training_enabled=True, training_price=40.0)
        await factory.individual("athlete")

        trainers = await ProfileService(db_session).list_trainers()

        assert [row["user"].username for row in trainers] == ["coach"]


@pytest.mark.integration
class TestSearch:
    @pytest.mark.asyncio
    async def test_kind_filter(self, db_session, factory):
        await factory.individual("ironlifter")
        await factory.gym("ironworks")
        await factory.brand("ironwear")
        service = UserService(db_session)

        everyone = await service.search_users("iron")
        gyms = await service.search_users("iron", kind="gym")
        individuals = await service.search_users("IRON", kind=UserKind.INDIVIDUAL)

        assert {user.username for user in everyone} == {"ironlifter", "ironworks", "ironwear"}
        assert [user.username for user in gyms] == ["ironworks"]
        assert [user.username for user in individuals] == ["ironlifter"]

    @pytest.mark.asyncio
    async def test_unknown_kind_is_rejected(self, db_session):
        with pytest.raises(ValidationError):
            await UserService(db_session).search_users("iron", kind="coach")
