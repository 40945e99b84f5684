"""Comment endpoints for the Dongne Board API."""

from fastapi import APIRouter, HTTPException, status

from dongne_board.models import Comment, Post
from dongne_board.schemas.post import (
    CommentCreate,
    CommentCreated,
    CommentResponse,
    comment_response,
)
from dongne_board.services import feed
from dongne_board.services.engagement import EngagementService

from ..dependencies import CurrentUserDep, NotificationServiceDep, SessionDep

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("/", response_model=CommentCreated, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationServiceDep,
) -> CommentCreated:
    """Add a comment to a post and notify its author.

    Raises:
        HTTPException: If the post does not exist
    """
    post = db.get(Post, comment_data.post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

    comment = EngagementService.add_comment(
        db,
        post,
        current_user,
        comment_data.content,
        is_anonymous=comment_data.is_anonymous,
    )
    notifications.comment_created(db, post, comment, current_user)
    return CommentCreated(comment_id=comment.id)


@router.get("/post/{post_id}", response_model=list[CommentResponse])
async def list_comments(post_id: int, db: SessionDep) -> list[CommentResponse]:
    """List a post's comments, newest first, with author profile fields."""
    return [
        comment_response(comment, author)
        for comment, author in feed.comments_for_post(db, post_id)
    ]


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, bool]:
    """Delete one of the caller's own comments.

    Raises:
        HTTPException: 404 if the comment is missing, 403 if the caller did not write it
    """
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    if comment.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the author can delete this comment",
        )

    EngagementService.delete_comment(db, comment)
    return {"success": True}
