"""
Security test fixtures.

These fixtures enable testing security scenarios like IDOR (Insecure Direct
Object Reference) by creating multiple users and their associated data.
"""
from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from models.canvas import CanvasPosition
from models.collection import Collection
from models.user import User


@pytest.fixture
async def user_a(db_session: AsyncSession) -> User:
    """Create the first test user (User A)."""
    user = User(username="user_a", email="user-a@test.com", password_hash="!")
    db_session.add(user)
    await db_session.flush()
    return user


@pytest.fixture
async def user_b(db_session: AsyncSession) -> User:
    """Create a second test user (User B) for IDOR testing."""
    user = User(username="user_b", email="user-b@test.com", password_hash="!")
    db_session.add(user)
    await db_session.flush()
    return user


@pytest.fixture
async def user_a_collection(db_session: AsyncSession, user_a: User) -> Collection:
    """Create a collection belonging to User A."""
    collection = Collection(user_id=user_a.id, name="User A's Collection")
    db_session.add(collection)
    await db_session.flush()
    return collection


@pytest.fixture
async def user_a_bookmark(
    db_session: AsyncSession,
    user_a: User,
    user_a_collection: Collection,
) -> Bookmark:
    """Create a bookmark belonging to User A, placed on User A's canvas."""
    bookmark = Bookmark(
        user_id=user_a.id,
        collection_id=user_a_collection.id,
        url="https://user-a-bookmark.example.com/",
        title="User A's Private Bookmark",
        description="This should only be accessible to User A",
    )
    db_session.add(bookmark)
    await db_session.flush()
    db_session.add(
        CanvasPosition(
            bookmark_id=bookmark.id,
            collection_id=user_a_collection.id,
            x_position=5,
            y_position=5,
        ),
    )
    await db_session.flush()
    return bookmark


@pytest.fixture
async def user_b_bookmark(db_session: AsyncSession, user_b: User) -> Bookmark:
    """Create a bookmark belonging to User B."""
    bookmark = Bookmark(
        user_id=user_b.id,
        url="https://user-b-bookmark.example.com/",
        title="User B's Private Bookmark",
    )
    db_session.add(bookmark)
    await db_session.flush()
    return bookmark


@pytest.fixture
async def client_as_user_a(app: FastAPI, user_a: User) -> AsyncGenerator[AsyncClient]:
    """Client identifying as User A."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-User-Id": str(user_a.id), "X-User-Email": user_a.email},
    ) as client:
        yield client


@pytest.fixture
async def client_as_user_b(app: FastAPI, user_b: User) -> AsyncGenerator[AsyncClient]:
    """Client identifying as User B."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-User-Id": str(user_b.id), "X-User-Email": user_b.email},
    ) as client:
        yield client
