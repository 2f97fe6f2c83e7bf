#!/usr/bin/env python3
"""
Seed the database with a small community for local development.

Safe to run repeatedly: users are looked up by external id and existing
follows, profiles and requests are left alone.
"""

import asyncio
import os
import random
import sys

# Add parent directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from fitsocial.core.exceptions import AlreadyExistsError, AlreadyFollowingError
from fitsocial.core.exceptions import AlreadyRequestedError
from fitsocial.database import AsyncSessionLocal, engine
from fitsocial.services.post_service import PostService
from fitsocial.services.social_service import SocialService
from fitsocial.services.training_service import TrainingService
from fitsocial.services.user_service import UserService
from fitsocial.services.workout_service import WorkoutService

SEED_USERS = [
    {
        "external_id": "seed|alex",
        "email": "alex@example.com",
        "name": "Alex Runner",
        "kind": "individual",
        "profile": {
            "stats": {"height": 178, "weight": 72},
            "is_training_enabled": True,
            "training_price": 40.0,
        },
    },
    {
        "external_id": "seed|sam",
        "email": "sam@example.com",
        "name": "Sam Lifts",
        "kind": "individual",
        "profile": {"stats": {"height": 185, "weight": 90}},
    },
    {
        "external_id": "seed|ironworks",
        "email": "hello@ironworks.example.com",
        "name": "Ironworks Gym",
        "kind": "gym",
        "profile": {"amenities": ["sauna", "free weights", "pool"]},
    },
    {
        "external_id": "seed|peakfuel",
        "email": "team@peakfuel.example.com",
        "name": "Peak Fuel",
        "kind": "brand",
        "profile": {"business_info": {"website": "https://peakfuel.example.com"}},
    },
]


async def seed_data():
    """Seed the database with initial data."""
    print("🌱 Starting database seeding...")

    async with AsyncSessionLocal() as session:
        user_service = UserService(session)
        social_service = SocialService(session)
        workout_service = WorkoutService(session)

        # 1. Users and profiles
        users = {}
        for data in SEED_USERS:
            user = await user_service.get_or_create_user(
                data["external_id"], email=data["email"], name=data["name"]
            )
            if not user.onboarding_complete:
                try:
                    await user_service.complete_onboarding(
                        user.id, data["kind"], data["profile"]
                    )
                    print(f"✅ Onboarded {user.username} as {data['kind']}")
                except AlreadyExistsError:
                    print(f"ℹ️  {user.username} already has a profile")
            users[data["external_id"]] = user

        # 2. Follow graph: everybody follows everybody
        for follower in users.values():
            for target in users.values():
                if follower.id == target.id:
                    continue
                try:
                    await social_service.follow(follower.id, target.id)
                except AlreadyFollowingError:
                    pass
        print("✅ Follow graph seeded")

        # 3. Workout logs for the individuals
        for key in ("seed|alex", "seed|sam"):
            for _ in range(5):
                await workout_service.log_workout(
                    users[key].id,
                    cardio_details=[
                        {
                            "type": "run",
                            "distance": random.randint(3, 12),
                            "duration": random.randint(20, 70),
                        }
                    ],
                    mobility_details=[{"type": "stretch", "duration": 10}],
                )
        print("✅ Workouts and activity ledger seeded")

        # 4. A post and a training request
        await PostService(session).create_post(
            users["seed|alex"].id, content="Morning intervals done", tags=["running"]
        )
        try:
            await TrainingService(session).send_training_request(
                users["seed|sam"].id, users["seed|alex"].id, "Coach me for a 10k?"
            )
        except AlreadyRequestedError:
            pass
        print("✅ Posts and training requests seeded")

    await engine.dispose()
    print("🎉 Database seeding complete!")


if __name__ == "__main__":
    asyncio.run(seed_data())
