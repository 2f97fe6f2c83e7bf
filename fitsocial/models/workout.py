"""
Workout log model - a typed-in session and the points it earned.

Each log carries up to three detail lists:
    resistance_details: [{"exercise": "squat", "sets": 3, "reps": [5, 5, 5], "weight": [100, 100, 100]}]
    cardio_details:     [{"type": "run", "distance": 5, "duration": 30}]
    mobility_details:   [{"type": "yoga", "duration": 20}]
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from fitsocial.database import Base


class Workout(Base):
    __tablename__ = "workouts"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    resistance_details: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON)
    cardio_details: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON)
    mobility_details: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON)
    activity_score: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (Index("idx_workout_user_created", "user_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Workout(id={self.id}, user_id={self.user_id}, activity_score={self.activity_score})>"
