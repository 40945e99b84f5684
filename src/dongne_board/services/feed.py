"""Query helpers for the post feeds (neighborhood, map bounds, search)."""

from __future__ import annotations

from sqlalchemy import desc, or_
from sqlalchemy.orm import Query, Session

from dongne_board.models import Category, Comment, Empathy, Post, User

# Number of leading address tokens that form the match prefix for each scope.
SCOPE_DEPTH = {"city": 1, "district": 2, "neighborhood": 3}


def neighborhood_prefix(neighborhood: str, scope: str = "neighborhood") -> str:
    """Return the address prefix used to match posts for a feed scope.

    Addresses are space-delimited "City District Neighborhood" strings. The
    scope selects how many leading tokens form the prefix; when the address
    has fewer tokens than the scope needs, the whole string is used.

    >>> neighborhood_prefix("서울시 강남구 역삼동", "district")
    '서울시 강남구'
    """
    parts = neighborhood.split()
    depth = SCOPE_DEPTH[scope]
    if len(parts) >= depth:
        return " ".join(parts[:depth])
    return neighborhood


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def visible_posts(db: Session, category: Category | None = None) -> Query[Post]:
    """Return a query over visible posts, optionally restricted to a category."""
    query = db.query(Post).filter(Post.is_visible.is_(True))
    if category is not None:
        query = query.filter(Post.category == category)
    return query


def apply_sort(query: Query[Post], sort_by: str) -> Query[Post]:
    """Order by recency or by empathy count, newest id breaking ties."""
    if sort_by == "popular":
        return query.order_by(desc(Post.empathy_count), desc(Post.id))
    return query.order_by(desc(Post.created_at), desc(Post.id))


def posts_by_neighborhood(
    db: Session,
    neighborhood: str,
    *,
    limit: int = 20,
    offset: int = 0,
    sort_by: str = "recent",
    category: Category | None = None,
    scope: str = "neighborhood",
) -> list[Post]:
    """List visible posts whose address starts with the scope prefix."""
    prefix = neighborhood_prefix(neighborhood, scope)
    query = visible_posts(db, category).filter(
        Post.neighborhood.like(f"{_escape_like(prefix)}%", escape="\\")
    )
    return apply_sort(query, sort_by).offset(offset).limit(limit).all()


def posts_by_bounds(
    db: Session,
    *,
    north: float,
    south: float,
    east: float,
    west: float,
    category: Category | None = None,
    sort_by: str = "recent",
    limit: int = 50,
) -> list[Post]:
    """List visible posts whose coordinates fall inside a bounding box."""
    query = visible_posts(db, category).filter(
        Post.latitude.is_not(None),
        Post.longitude.is_not(None),
        Post.latitude >= south,
        Post.latitude <= north,
        Post.longitude >= west,
        Post.longitude <= east,
    )
    return apply_sort(query, sort_by).limit(limit).all()


def search_posts(
    db: Session,
    keyword: str,
    *,
    neighborhood: str | None = None,
    category: Category | None = None,
    sort_by: str = "recent",
    limit: int = 20,
    offset: int = 0,
) -> list[Post]:
    """Substring search over post content and neighborhood."""
    pattern = f"%{_escape_like(keyword)}%"
    query = visible_posts(db, category).filter(
        or_(
            Post.content.like(pattern, escape="\\"),
            Post.neighborhood.like(pattern, escape="\\"),
        )
    )
    if neighborhood:
        query = query.filter(Post.neighborhood == neighborhood)
    return apply_sort(query, sort_by).offset(offset).limit(limit).all()


def posts_by_author(db: Session, user_id: int) -> list[Post]:
    """Return every post written by a user, newest first."""
    return (
        db.query(Post)
        .filter(Post.user_id == user_id)
        .order_by(desc(Post.created_at), desc(Post.id))
        .all()
    )


def posts_empathized_by(db: Session, user_id: int) -> list[Post]:
    """Return the posts a user has empathized with, most recent reaction first."""
    return (
        db.query(Post)
        .join(Empathy, Empathy.post_id == Post.id)
        .filter(Empathy.user_id == user_id)
        .order_by(desc(Empathy.created_at), desc(Empathy.id))
        .all()
    )


def comments_for_post(db: Session, post_id: int) -> list[tuple[Comment, User | None]]:
    """Return a post's comments paired with their authors, newest first."""
    rows = (
        db.query(Comment, User)
        .outerjoin(User, Comment.user_id == User.id)
        .filter(Comment.post_id == post_id)
        .order_by(desc(Comment.created_at), desc(Comment.id))
        .all()
    )
    return [(comment, author) for comment, author in rows]
