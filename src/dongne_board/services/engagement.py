"""Engagement ledger maintenance for empathy and comments."""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dongne_board.models import Comment, Empathy, Post, User


class AlreadyEmpathizedError(Exception):
    """Raised when a user empathizes the same post twice."""


class EngagementService:
    """Keeps cached post and user counters consistent with the ledgers.

    Empathy counters are recomputed from the ledger on every change so that
    drift from concurrent writers heals on the next write. Comment counters
    are incremented and decremented, never below zero.
    """

    @staticmethod
    def count_empathy(db: Session, post_id: int) -> int:
        """Count empathy rows referencing a post."""
        return db.query(func.count(Empathy.id)).filter(Empathy.post_id == post_id).scalar() or 0

    @staticmethod
    def has_empathized(db: Session, user_id: int, post_id: int) -> bool:
        """Return True if the user already empathized with the post."""
        return (
            db.query(Empathy.id)
            .filter(Empathy.user_id == user_id, Empathy.post_id == post_id)
            .first()
            is not None
        )

    @classmethod
    def add_empathy(cls, db: Session, post: Post, user: User) -> int:
        """Insert an empathy row and refresh the cached counters.

        Returns:
            The post's empathy count after the insert.

        Raises:
            AlreadyEmpathizedError: If the (user, post) pair already exists.
        """
        if cls.has_empathized(db, user.id, post.id):
            raise AlreadyEmpathizedError(f"User {user.id} already empathized post {post.id}")
        db.add(Empathy(user_id=user.id, post_id=post.id))
        try:
            db.flush()
        except IntegrityError as err:
            db.rollback()
            raise AlreadyEmpathizedError(
                f"User {user.id} already empathized post {post.id}"
            ) from err
        count = cls._refresh_empathy_counters(db, post)
        db.commit()
        return count

    @classmethod
    def remove_empathy(cls, db: Session, post: Post, user: User) -> int:
        """Delete the user's empathy if present and refresh the counters."""
        db.query(Empathy).filter(
            Empathy.user_id == user.id,
            Empathy.post_id == post.id,
        ).delete()
        count = cls._refresh_empathy_counters(db, post)
        db.commit()
        return count

    @classmethod
    def _refresh_empathy_counters(cls, db: Session, post: Post) -> int:
        db.flush()
        count = cls.count_empathy(db, post.id)
        post.empathy_count = count
        author = db.get(User, post.user_id)
        if author is not None:
            author.total_empathy = cls.empathy_received(db, author.id)
        return count

    @staticmethod
    def add_comment(
        db: Session,
        post: Post,
        user: User,
        content: str,
        *,
        is_anonymous: bool = False,
    ) -> Comment:
        """Insert a comment and increment the post and author counters."""
        comment = Comment(
            post_id=post.id,
            user_id=user.id,
            content=content,
            is_anonymous=is_anonymous,
        )
        db.add(comment)
        post.comment_count = (post.comment_count or 0) + 1
        author = db.get(User, post.user_id)
        if author is not None:
            author.total_comments = (author.total_comments or 0) + 1
        db.commit()
        db.refresh(comment)
        return comment

    @staticmethod
    def delete_comment(db: Session, comment: Comment) -> None:
        """Delete a comment and decrement the counters, guarded at zero."""
        post = db.get(Post, comment.post_id)
        db.delete(comment)
        if post is not None:
            if post.comment_count and post.comment_count > 0:
                post.comment_count -= 1
            author = db.get(User, post.user_id)
            if author is not None and author.total_comments and author.total_comments > 0:
                author.total_comments -= 1
        db.commit()

    @staticmethod
    def empathy_received(db: Session, user_id: int) -> int:
        """Count empathy rows on every post written by the user."""
        return (
            db.query(func.count(Empathy.id))
            .join(Post, Empathy.post_id == Post.id)
            .filter(Post.user_id == user_id)
            .scalar()
            or 0
        )

    @classmethod
    def user_stats(cls, db: Session, user_id: int) -> dict[str, int]:
        """Compute the user's totals live from the ledgers."""
        total_posts = (
            db.query(func.count(Post.id)).filter(Post.user_id == user_id).scalar() or 0
        )
        total_comments = (
            db.query(func.count(Comment.id))
            .join(Post, Comment.post_id == Post.id)
            .filter(Post.user_id == user_id)
            .scalar()
            or 0
        )
        return {
            "total_posts": int(total_posts),
            "total_empathy": int(cls.empathy_received(db, user_id)),
            "total_comments": int(total_comments),
        }
