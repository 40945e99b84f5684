"""Post-related endpoints for the Dongne Board API."""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from dongne_board.models import Category, Post, User
from dongne_board.schemas.post import (
    PostCreate,
    PostCreated,
    PostDetailResponse,
    PostResponse,
    Scope,
    SortBy,
    comment_response,
)
from dongne_board.services import feed

from ..dependencies import CurrentUserDep, SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("/", response_model=PostCreated, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostCreated:
    """Create a new post in the author's neighborhood.

    Args:
        post_data: Category, content, images and location of the post
        current_user: Authenticated author
        db: Database session

    Returns:
        The id of the created post
    """
    post = Post(
        user_id=current_user.id,
        category=post_data.category,
        title=post_data.title,
        content=post_data.content,
        images=post_data.images,
        neighborhood=post_data.neighborhood,
        latitude=post_data.latitude,
        longitude=post_data.longitude,
        is_anonymous=post_data.is_anonymous,
    )
    db.add(post)
    author = db.get(User, current_user.id)
    if author is not None:
        author.total_posts = (author.total_posts or 0) + 1
    db.commit()
    db.refresh(post)

    logger.info("User %s created post %s in %s", current_user.id, post.id, post.neighborhood)
    return PostCreated(post_id=post.id)


@router.get("/neighborhood", response_model=list[PostResponse])
async def list_neighborhood_posts(
    db: SessionDep,
    neighborhood: str = Query(..., min_length=1, description="Address like '서울시 강남구 역삼동'"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    sort_by: SortBy = Query("recent"),
    category: Category | None = Query(None),
    scope: Scope = Query("neighborhood", description="How much of the address to match"),
) -> list[Post]:
    """List visible posts whose address starts with the scope's prefix."""
    return feed.posts_by_neighborhood(
        db,
        neighborhood,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        category=category,
        scope=scope,
    )


@router.get("/bounds", response_model=list[PostResponse])
async def list_posts_in_bounds(
    db: SessionDep,
    north: float = Query(...),
    south: float = Query(...),
    east: float = Query(...),
    west: float = Query(...),
    category: Category | None = Query(None),
    sort_by: SortBy = Query("recent"),
    limit: int = Query(50, ge=1, le=200),
) -> list[Post]:
    """List visible posts located inside a map bounding box (inclusive)."""
    return feed.posts_by_bounds(
        db,
        north=north,
        south=south,
        east=east,
        west=west,
        category=category,
        sort_by=sort_by,
        limit=limit,
    )


@router.get("/search", response_model=list[PostResponse])
async def search_posts(
    db: SessionDep,
    keyword: str = Query(..., min_length=1),
    neighborhood: str | None = Query(None, description="Exact neighborhood filter"),
    category: Category | None = Query(None),
    sort_by: SortBy = Query("recent"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> list[Post]:
    """Search visible posts by substring of content or neighborhood."""
    return feed.search_posts(
        db,
        keyword,
        neighborhood=neighborhood,
        category=category,
        sort_by=sort_by,
        limit=limit,
        offset=offset,
    )


@router.get("/mine", response_model=list[PostResponse])
async def list_my_posts(current_user: CurrentUserDep, db: SessionDep) -> list[Post]:
    """List every post written by the caller, hidden ones included."""
    return feed.posts_by_author(db, current_user.id)


@router.get("/empathized", response_model=list[PostResponse])
async def list_empathized_posts(current_user: CurrentUserDep, db: SessionDep) -> list[Post]:
    """List posts the caller has empathized with."""
    return feed.posts_empathized_by(db, current_user.id)


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(post_id: int, db: SessionDep) -> PostDetailResponse:
    """Get a post together with its comments.

    Raises:
        HTTPException: If the post does not exist
    """
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

    detail = PostDetailResponse.model_validate(post)
    detail.comments = [
        comment_response(comment, author)
        for comment, author in feed.comments_for_post(db, post_id)
    ]
    return detail
