"""
Workout log API endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from fitsocial.dependencies import (
    PaginationParams,
    get_current_user,
    get_pagination_params,
    get_workout_service,
)
from fitsocial.models.user import User
from fitsocial.schemas.common import ERROR_RESPONSES
from fitsocial.schemas.workouts import (
    WorkoutLoggedResponse,
    WorkoutLogRequest,
    WorkoutResponse,
)
from fitsocial.services.workout_service import WorkoutService

router = APIRouter(prefix="/workouts", tags=["Workouts"], responses=ERROR_RESPONSES)


@router.post(
    "",
    response_model=WorkoutLoggedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a workout",
    description=(
        "Stores the caller's workout log and adds its points to their "
        "activity score as a workout_posted ledger entry."
    ),
)
async def log_workout(
    request: WorkoutLogRequest,
    current_user: User = Depends(get_current_user),
    workout_service: WorkoutService = Depends(get_workout_service),
) -> WorkoutLoggedResponse:
    result = await workout_service.log_workout(current_user.id, **request.details())
    return WorkoutLoggedResponse(**result)


@router.get("/me", response_model=List[WorkoutResponse], summary="My workout logs")
async def my_workouts(
    pagination: PaginationParams = Depends(get_pagination_params),
    current_user: User = Depends(get_current_user),
    workout_service: WorkoutService = Depends(get_workout_service),
) -> List[WorkoutResponse]:
    workouts = await workout_service.list_workouts(
        current_user.id, skip=pagination.skip, limit=pagination.limit
    )
    return [WorkoutResponse.model_validate(workout) for workout in workouts]


@router.get(
    "/user/{user_id}", response_model=List[WorkoutResponse], summary="Workout logs by user"
)
async def user_workouts(
    user_id: int,
    pagination: PaginationParams = Depends(get_pagination_params),
    current_user: User = Depends(get_current_user),
    workout_service: WorkoutService = Depends(get_workout_service),
) -> List[WorkoutResponse]:
    workouts = await workout_service.list_workouts(
        user_id, skip=pagination.skip, limit=pagination.limit
    )
    return [WorkoutResponse.model_validate(workout) for workout in workouts]
