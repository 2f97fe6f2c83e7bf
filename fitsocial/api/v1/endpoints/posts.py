"""
Post, like and comment API endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from fitsocial.config import settings
from fitsocial.dependencies import (
    PaginationParams,
    get_current_user,
    get_pagination_params,
    get_post_service,
)
from fitsocial.models.post import PostPrivacy
from fitsocial.models.user import User
from fitsocial.schemas.common import ERROR_RESPONSES, SuccessResponse
from fitsocial.schemas.posts import (
    CommentCreateRequest,
    CommentResponse,
    LikeToggleResponse,
    PostCreateRequest,
    PostResponse,
)
from fitsocial.services.post_service import PostService

router = APIRouter(prefix="/posts", tags=["Posts"], responses=ERROR_RESPONSES)


@router.post(
    "", response_model=PostResponse, status_code=status.HTTP_201_CREATED, summary="Create post"
)
async def create_post(
    request: PostCreateRequest,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> PostResponse:
    post = await post_service.create_post(
        user_id=current_user.id,
        content=request.content,
        media_url=request.media_url,
        media_type=request.media_type,
        privacy=request.privacy,
        tags=request.tags,
        media_public_id=request.media_public_id,
    )
    return PostResponse.model_validate(post)


@router.get("/feed", response_model=List[PostResponse], summary="Public feed")
async def get_feed(
    pagination: PaginationParams = Depends(get_pagination_params),
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> List[PostResponse]:
    posts = await post_service.list_feed(skip=pagination.skip, limit=pagination.limit)
    return [PostResponse.model_validate(post) for post in posts]


@router.get("/user/{user_id}", response_model=List[PostResponse], summary="Posts by user")
async def get_user_posts(
    user_id: int,
    privacy: Optional[PostPrivacy] = Query(None),
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> List[PostResponse]:
    # Only the author sees non-public posts
    if user_id != current_user.id:
        privacy = PostPrivacy.PUBLIC
    posts = await post_service.list_user_posts(user_id, privacy)
    return [PostResponse.model_validate(post) for post in posts]


@router.delete("/{post_id}", response_model=SuccessResponse, summary="Delete post")
async def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> SuccessResponse:
    await post_service.delete_post(current_user.id, post_id)
    return SuccessResponse(message="Post deleted")


@router.post("/{post_id}/like", response_model=LikeToggleResponse, summary="Toggle like")
async def toggle_like(
    post_id: int,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> LikeToggleResponse:
    return LikeToggleResponse(**await post_service.toggle_like(current_user.id, post_id))


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
)
async def create_comment(
    post_id: int,
    request: CommentCreateRequest,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> CommentResponse:
    comment = await post_service.create_comment(current_user.id, post_id, request.content)
    return CommentResponse.model_validate(comment)


@router.get(
    "/{post_id}/comments", response_model=List[CommentResponse], summary="Post comments"
)
async def list_comments(
    post_id: int,
    limit: int = Query(settings.comments_default_limit, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> List[CommentResponse]:
    comments = await post_service.list_comments(post_id, limit=limit)
    return [CommentResponse.model_validate(comment) for comment in comments]


@router.delete(
    "/comments/{comment_id}", response_model=SuccessResponse, summary="Delete comment"
)
async def delete_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> SuccessResponse:
    await post_service.delete_comment(current_user.id, comment_id)
    return SuccessResponse(message="Comment deleted")
