"""
API v1 router - Combines all API endpoints.
"""

from fastapi import APIRouter

from fitsocial.api.v1.endpoints import (
    activity,
    chats,
    events,
    posts,
    social,
    training,
    users,
    workouts,
)

api_router = APIRouter(prefix="/v1")

api_router.include_router(users.router)
api_router.include_router(users.profiles_router)
api_router.include_router(social.router)
api_router.include_router(activity.router)
api_router.include_router(activity.leaderboard_router)
api_router.include_router(workouts.router)
api_router.include_router(training.router)
api_router.include_router(posts.router)
api_router.include_router(chats.router)
api_router.include_router(events.router)

# API metadata for documentation
tags_metadata = [
    {
        "name": "Users",
        "description": "Account lookup, search and onboarding",
    },
    {
        "name": "Profiles",
        "description": "Kind-specific profiles for individuals, gyms and brands",
    },
    {
        "name": "Social",
        "description": "Follow graph and follower counters",
    },
    {
        "name": "Activity",
        "description": "Append-only activity ledger and score reconciliation",
    },
    {
        "name": "Leaderboard",
        "description": "Ranking of individuals by activity score",
    },
    {
        "name": "Workouts",
        "description": "Workout logs and the activity points they earn",
    },
    {
        "name": "Training",
        "description": "Training partnership requests",
    },
    {
        "name": "Posts",
        "description": "Posts, likes and comments",
    },
    {
        "name": "Chats",
        "description": "Two-person chats and messages",
    },
    {
        "name": "Events",
        "description": "Community events and RSVPs",
    },
]
