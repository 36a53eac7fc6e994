"""Tests for the owner-checked media endpoint."""
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from core.config import Settings, get_settings
from models.user import User


@pytest.fixture
def media_dir(app: FastAPI, tmp_path: Path) -> Iterator[Path]:
    """Point the media endpoint at a temporary directory."""
    directory = tmp_path / "media"
    directory.mkdir()

    def override_get_settings() -> Settings:
        return Settings(
            _env_file=None,
            database_url="postgresql://test",
            MEDIA_DIR=str(directory),
        )

    app.dependency_overrides[get_settings] = override_get_settings
    yield directory
    app.dependency_overrides.pop(get_settings, None)


async def _store(
    client: AsyncClient,
    media_dir: Path,
    file_name: str,
    reference: bool = True,
) -> None:
    (media_dir / file_name).write_bytes(b"\x00\x01media-bytes")
    if reference:
        response = await client.post(
            "/bookmarks/",
            json={"title": "clip", "type": "video", "url": f"uploads/media/{file_name}"},
        )
        assert response.status_code == 201


def _identity(user: User) -> dict[str, str | int]:
    return {"user_id": user.id, "user_email": user.email}


async def test_media_served_inline_with_query_identity(
    client: AsyncClient,
    anonymous_client: AsyncClient,
    test_user: User,
    media_dir: Path,
) -> None:
    """Test that the owner can stream a referenced file using query parameters."""
    file_name = f"{test_user.id}_clip.mp4"
    await _store(client, media_dir, file_name)

    response = await anonymous_client.get(f"/media/{file_name}", params=_identity(test_user))
    assert response.status_code == 200
    assert response.content == b"\x00\x01media-bytes"
    assert response.headers["content-type"] == "video/mp4"
    assert response.headers["content-disposition"].startswith("inline")


async def test_media_referenced_by_content(
    client: AsyncClient,
    test_user: User,
    media_dir: Path,
) -> None:
    """Test that a bookmark referencing the file in its content also grants access."""
    file_name = f"{test_user.id}_voice.mp3"
    (media_dir / file_name).write_bytes(b"mp3")
    await client.post(
        "/bookmarks/",
        json={"title": "note", "type": "text", "content": f"uploads/media/{file_name}"},
    )

    response = await client.get(f"/media/{file_name}")
    assert response.status_code == 200


async def test_media_other_owner_prefix(
    client: AsyncClient,
    other_user: User,
    media_dir: Path,
) -> None:
    """Test that a file named for another user is forbidden."""
    file_name = f"{other_user.id}_clip.mp4"
    (media_dir / file_name).write_bytes(b"x")

    response = await client.get(f"/media/{file_name}")
    assert response.status_code == 403
    assert response.json() == {"error": "Access denied"}


async def test_media_missing_file(
    client: AsyncClient,
    test_user: User,
    media_dir: Path,  # noqa: ARG001
) -> None:
    """Test that a file that does not exist is a 404."""
    response = await client.get(f"/media/{test_user.id}_missing.mp4")
    assert response.status_code == 404


async def test_media_unreferenced_file(
    client: AsyncClient,
    test_user: User,
    media_dir: Path,
) -> None:
    """Test that a file no bookmark points at is a 404."""
    file_name = f"{test_user.id}_orphan.mp4"
    await _store(client, media_dir, file_name, reference=False)

    response = await client.get(f"/media/{file_name}")
    assert response.status_code == 404


async def test_media_disallowed_type(
    client: AsyncClient,
    test_user: User,
    media_dir: Path,
) -> None:
    """Test that a type outside the allow-list is forbidden."""
    file_name = f"{test_user.id}_page.html"
    await _store(client, media_dir, file_name)

    response = await client.get(f"/media/{file_name}")
    assert response.status_code == 403
    assert response.json() == {"error": "Access denied"}


async def test_media_path_traversal(
    client: AsyncClient,
    test_user: User,
    media_dir: Path,  # noqa: ARG001
) -> None:
    """Test that names with path components never reach the file system."""
    response = await client.get(f"/media/..%2F{test_user.id}_clip.mp4")
    assert response.status_code == 404


async def test_media_requires_identity(
    anonymous_client: AsyncClient,
    test_user: User,
    media_dir: Path,  # noqa: ARG001
) -> None:
    """Test that the media endpoint is protected."""
    response = await anonymous_client.get(f"/media/{test_user.id}_clip.mp4")
    assert response.status_code == 401
