"""
Repository layer - Data access patterns for the application.

This module exports all repositories for easy importing:
- BaseRepository: creation and primary-key lookups
- UserRepository, ProfileRepository: identity and profile variants
- FollowRepository: follow edges
- ActivityRepository, LeaderboardRepository: ledger and ranking
- TrainingRequestRepository, PostRepository, ChatRepository, EventRepository
- WorkoutRepository: workout logs
"""

from .activity_repository import ActivityRepository
from .base import BaseRepository
from .chat_repository import ChatRepository
from .event_repository import EventRepository
from .follow_repository import FollowRepository
from .leaderboard_repository import LeaderboardRepository
from .post_repository import PostRepository
from .profile_repository import ProfileRepository
from .training_repository import TrainingRequestRepository
from .user_repository import UserRepository
from .workout_repository import WorkoutRepository

__all__ = [
    "ActivityRepository",
    "BaseRepository",
    "ChatRepository",
    "EventRepository",
    "FollowRepository",
    "LeaderboardRepository",
    "PostRepository",
    "ProfileRepository",
    "TrainingRequestRepository",
    "UserRepository",
    "WorkoutRepository",
]
