# Import all models to register them with the metadata
from .activity import ActivityKind, ActivityTransaction
from .chat import Chat, ChatCreationReason, ChatMember, Message
from .event import Event, EventRSVP, EventType, RSVPStatus
from .post import Comment, Like, MediaType, Post, PostPrivacy
from .profile import PROFILE_MODELS, BrandProfile, GymProfile, IndividualProfile
from .social import FollowEdge
from .training import TrainingRequest, TrainingRequestStatus
from .user import User, UserKind
from .workout import Workout

__all__ = [
    "User",
    "UserKind",
    "IndividualProfile",
    "GymProfile",
    "BrandProfile",
    "PROFILE_MODELS",
    "FollowEdge",
    "ActivityTransaction",
    "ActivityKind",
    "TrainingRequest",
    "TrainingRequestStatus",
    "Post",
    "PostPrivacy",
    "MediaType",
    "Like",
    "Comment",
    "Chat",
    "ChatMember",
    "ChatCreationReason",
    "Message",
    "Event",
    "EventRSVP",
    "EventType",
    "RSVPStatus",
    "Workout",
]
