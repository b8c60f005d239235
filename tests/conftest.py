# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from forum_diff.core.security import create_access_token  # noqa: E402
from forum_diff.db.session import Base, create_tables, drop_tables  # noqa: E402
from forum_diff.db.session import get_db as app_get_session  # noqa: E402
from forum_diff.main import app as fastapi_app  # noqa: E402
from forum_diff.models import Post, Revision, User  # noqa: E402
from forum_diff.models.user import (  # noqa: E402
    PERMISSION_DELETE_EDIT_HISTORY,
    PERMISSION_SELF_DELETE_EDIT_HISTORY,
    PERMISSION_VIEW_EDIT_HISTORY,
)
from forum_diff.repositories.archive_repo import RevisionArchiveRepository  # noqa: E402

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2026, 1, 1, tzinfo=UTC)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    try:
        yield engine
    finally:
        drop_tables(engine)
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
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


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
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _create_user(db: Session, username: str, permissions: list[str]) -> User:
    user = User(username=username, permissions=permissions)
    db.add(user)
    db.flush()
    db.refresh(user)
    return user


@pytest.fixture()
def author(db_session: Session) -> User:
    """Post author allowed to view and self-delete edit history."""
    return _create_user(
        db_session,
        "author",
        [PERMISSION_VIEW_EDIT_HISTORY, PERMISSION_SELF_DELETE_EDIT_HISTORY],
    )


@pytest.fixture()
def moderator(db_session: Session) -> User:
    """User allowed to view and delete any edit history."""
    return _create_user(
        db_session,
        "moderator",
        [PERMISSION_VIEW_EDIT_HISTORY, PERMISSION_DELETE_EDIT_HISTORY],
    )


@pytest.fixture()
def viewer(db_session: Session) -> User:
    """User who may only view edit history."""
    return _create_user(db_session, "viewer", [PERMISSION_VIEW_EDIT_HISTORY])


@pytest.fixture()
def outsider(db_session: Session) -> User:
    """User without any edit history abilities."""
    return _create_user(db_session, "outsider", [])


def auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    """Expose ``auth_headers`` to test modules."""
    return auth_headers


@pytest.fixture()
def make_post(db_session: Session, author: User) -> Callable[..., Post]:
    """Factory creating a post with the given live content."""

    def _make(content: str = "live content", user: User | None = None) -> Post:
        post = Post(
            user_id=(user or author).id,
            content=content,
            created_at=BASE_TIME,
        )
        db_session.add(post)
        db_session.flush()
        db_session.refresh(post)
        return post

    return _make


@pytest.fixture()
def add_revision(db_session: Session, author: User, moderator: User) -> Callable[..., Revision]:
    """Factory creating a revision row.

    ``archived`` moves the given content into a new archive instead of
    storing it inline; ``deleted`` soft-deletes the revision.
    """

    def _add(
        post: Post,
        number: int,
        content: str | None = None,
        *,
        archived: bool = False,
        deleted: bool = False,
        actor: User | None = None,
    ) -> Revision:
        revision = Revision(
            post_id=post.id,
            revision=number,
            content=None if archived else content,
            actor_id=(actor or author).id,
            created_at=BASE_TIME + timedelta(minutes=number),
        )
        if deleted:
            revision.deleted_at = BASE_TIME + timedelta(days=1)
            revision.deleted_user_id = moderator.id
            revision.content = None
        db_session.add(revision)
        db_session.flush()
        if archived:
            archive = RevisionArchiveRepository(db_session).create_archive(
                post.id, {revision.id: content or ""}
            )
            revision.archive_id = archive.id
        db_session.commit()
        db_session.refresh(revision)
        return revision

    return _add


@pytest.fixture()
def history(make_post: Callable[..., Post], add_revision: Callable[..., Revision]) -> dict[str, Any]:
    """Post with revisions 0, 1, 2 where 2 is the live head."""
    post = make_post("C")
    return {
        "post": post,
        "r0": add_revision(post, 0, "A"),
        "r1": add_revision(post, 1, "B"),
        "r2": add_revision(post, 2, None),
    }
