# tests/conftest.py
from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-dongne-board")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("OWNER_OPEN_ID", "owner-open-id")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="dongne-uploads-"))

from dongne_board.api.v1.dependencies import get_storage_dep
from dongne_board.core.security import create_session_token
from dongne_board.core.settings import settings
from dongne_board.db.session import Base
from dongne_board.db.session import get_db as app_get_session
from dongne_board.main import app as fastapi_app
from dongne_board.models import Category, Post, Role, User
from dongne_board.services.storage import LocalStorage

TEST_DB_URL = "sqlite://"
NEIGHBORHOOD = "서울시 강남구 역삼동"

_USER_COUNTER = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def storage_root(app: FastAPI, tmp_path) -> Iterator[LocalStorage]:
    """Route uploads to a per-test directory."""
    storage = LocalStorage(tmp_path / "uploads", settings.upload_url_prefix)
    app.dependency_overrides[get_storage_dep] = lambda: storage
    try:
        yield storage
    finally:
        app.dependency_overrides.pop(get_storage_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users with unique open ids."""

    def _make_user(
        nickname: str | None = None,
        *,
        role: Role = Role.USER,
        open_id: str | None = None,
    ) -> User:
        n = next(_USER_COUNTER)
        user = User(
            open_id=open_id or f"test-user-{n}",
            name=nickname or f"주민{n}",
            nickname=nickname or f"주민{n}",
            login_method="dev",
            role=role,
            neighborhood=NEIGHBORHOOD,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary test user."""
    return make_user("Test User")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second, unrelated user."""
    return make_user("Other User")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user("Admin", role=Role.ADMIN)


@pytest.fixture()
def owner_user(make_user: Callable[..., User]) -> User:
    """The account named by OWNER_OPEN_ID, which receives escalations."""
    return make_user("Owner", role=Role.ADMIN, open_id=settings.owner_open_id)


def cookie_headers(user: User) -> dict[str, str]:
    """Build request headers carrying a session cookie for ``user``."""
    token = create_session_token(user.open_id, name=user.name or "")
    return {"Cookie": f"{settings.session_cookie_name}={token}"}


@pytest.fixture()
def auth_headers(test_user: User) -> dict[str, str]:
    return cookie_headers(test_user)


@pytest.fixture()
def other_headers(other_user: User) -> dict[str, str]:
    return cookie_headers(other_user)


@pytest.fixture()
def admin_headers(admin_user: User) -> dict[str, str]:
    return cookie_headers(admin_user)


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory that persists posts for a given author."""

    def _make_post(author: User, **overrides: object) -> Post:
        fields: dict[str, object] = {
            "user_id": author.id,
            "category": Category.INCONVENIENCE,
            "content": "가로등이 고장났어요",
            "neighborhood": NEIGHBORHOOD,
            "latitude": 37.5006,
            "longitude": 127.0364,
        }
        fields.update(overrides)
        post = Post(**fields)
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make_post


@pytest.fixture()
def test_post(make_post: Callable[..., Post], test_user: User) -> Post:
    """Create a post authored by the primary test user."""
    return make_post(test_user)


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    """Expose ``cookie_headers`` to tests that sign in extra users."""
    return cookie_headers
