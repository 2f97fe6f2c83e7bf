"""
Workout log schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class ResistanceDetail(BaseModel):
    """reps[i] and weight[i] describe set i."""

    exercise: str = Field(..., min_length=1, max_length=100)
    sets: int = Field(..., ge=1, le=50)
    reps: List[int] = Field(..., description="Reps per set")
    weight: List[float] = Field(..., description="Weight per set")

    @model_validator(mode="after")
    def validate_per_set_lists(self):
        if any(value < 0 for value in self.reps) or any(value < 0 for value in self.weight):
            raise ValueError("reps and weight cannot be negative")
        return self


class CardioDetail(BaseModel):
    type: str = Field(..., min_length=1, max_length=50)
    distance: Optional[float] = Field(None, ge=0, description="Kilometres")
    duration: Optional[float] = Field(None, ge=0, description="Minutes")


class MobilityDetail(BaseModel):
    type: str = Field(..., min_length=1, max_length=50)
    duration: float = Field(..., ge=0, description="Minutes")


class WorkoutLogRequest(BaseModel):
    resistance_details: Optional[List[ResistanceDetail]] = None
    cardio_details: Optional[List[CardioDetail]] = None
    mobility_details: Optional[List[MobilityDetail]] = None

    def details(self) -> Dict[str, Optional[List[Dict[str, Any]]]]:
        """Detail lists as plain dicts, ready for the JSON columns."""
        return {
            field: [item.model_dump(exclude_none=True) for item in value]
            if value
            else None
            for field, value in (
                ("resistance_details", self.resistance_details),
                ("cardio_details", self.cardio_details),
                ("mobility_details", self.mobility_details),
            )
        }


class WorkoutLoggedResponse(BaseModel):
    workout_id: int
    score: int


class WorkoutResponse(BaseModel):
    id: int
    user_id: int
    resistance_details: Optional[List[Dict[str, Any]]] = None
    cardio_details: Optional[List[Dict[str, Any]]] = None
    mobility_details: Optional[List[Dict[str, Any]]] = None
    activity_score: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
