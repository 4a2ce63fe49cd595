import logging
from typing import Optional

from fastapi import APIRouter, Depends

from src.dependencies.auth import get_current_user, get_optional_user
from src.dependencies.services import get_player_service
from src.model.user_models import User
from src.schemas.generic import ApiResponse
from src.schemas.learning import PlayerLessonResponse, PlayerOutline, ProgressResponse
from src.services.player_service import PlayerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/learn", tags=["Course Player"])


@router.get(
    "/{slug}",
    response_model=ApiResponse[PlayerOutline],
    summary="Player outline",
    description="Lessons with completion flags, overall progress and where to resume.",
)
async def get_outline(
        slug: str,
        user: User = Depends(get_current_user),
        player_service: PlayerService = Depends(get_player_service),
) -> ApiResponse[PlayerOutline]:
    outline = await player_service.get_outline(user, slug)
    return ApiResponse[PlayerOutline].success(data=outline)


@router.get(
    "/{slug}/lessons/{lesson_id}",
    response_model=ApiResponse[PlayerLessonResponse],
    summary="Play a lesson",
    description="Full lesson content. Free-preview lessons are open to everyone.",
)
async def get_lesson(
        slug: str,
        lesson_id: int,
        user: Optional[User] = Depends(get_optional_user),
        player_service: PlayerService = Depends(get_player_service),
) -> ApiResponse[PlayerLessonResponse]:
    lesson = await player_service.get_lesson(user, slug, lesson_id)
    return ApiResponse[PlayerLessonResponse].success(data=lesson)


@router.post(
    "/lessons/{lesson_id}/complete",
    response_model=ApiResponse[ProgressResponse],
    summary="Mark lesson complete",
)
async def complete_lesson(
        lesson_id: int,
        user: User = Depends(get_current_user),
        player_service: PlayerService = Depends(get_player_service),
) -> ApiResponse[ProgressResponse]:
    progress = await player_service.set_lesson_completed(user, lesson_id, completed=True)
    return ApiResponse[ProgressResponse].success(data=progress)


@router.delete(
    "/lessons/{lesson_id}/complete",
    response_model=ApiResponse[ProgressResponse],
    summary="Mark lesson incomplete",
)
async def uncomplete_lesson(
        lesson_id: int,
        user: User = Depends(get_current_user),
        player_service: PlayerService = Depends(get_player_service),
) -> ApiResponse[ProgressResponse]:
    progress = await player_service.set_lesson_completed(user, lesson_id, completed=False)
    return ApiResponse[ProgressResponse].success(data=progress)
