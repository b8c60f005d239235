# src/forum_diff/api/v1/endpoints/posts.py
"""Post-related endpoints for the Forum Diff API."""

from fastapi import APIRouter, HTTPException, status

from forum_diff.api.v1.dependencies import CurrentUserDep, RevisionServiceDep, SessionDep
from forum_diff.core.errors import PermissionDeniedError
from forum_diff.models import Post
from forum_diff.schemas.post import PostResponse, PostUpdate

router = APIRouter(prefix="/posts", tags=["posts"])


def _get_post_or_404(db: SessionDep, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    return post


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    db: SessionDep,
) -> Post:
    """Get a specific post by ID.

    Raises:
        HTTPException: If post not found
    """
    return _get_post_or_404(db, post_id)


@router.patch("/{post_id}", response_model=PostResponse)
async def edit_post(
    post_id: int,
    post_data: PostUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
    service: RevisionServiceDep,
) -> Post:
    """Edit a post's content, recording the change in its revision history.

    Args:
        post_id: ID of the post to edit
        post_data: New content
        current_user: Authenticated user (author or holder of ``editPosts``)
        db: Database session
        service: Revision service recording the edit

    Raises:
        HTTPException: If post not found or the user may not edit it
    """
    post = _get_post_or_404(db, post_id)
    try:
        service.record_edit(post, post_data.content, current_user)
    except PermissionDeniedError as err:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(err),
        ) from err
    return post
