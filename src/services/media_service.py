"""Owner-checked access to uploaded media files."""
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from models.bookmark import Bookmark

logger = logging.getLogger(__name__)


class MediaError(Exception):
    """Base class for media access failures."""


class MediaAccessDeniedError(MediaError):
    """The file belongs to another user or has a disallowed type."""

    def __init__(self) -> None:
        super().__init__("Access denied")


class MediaNotFoundError(MediaError):
    """The file does not exist or no bookmark of the caller references it."""

    def __init__(self) -> None:
        super().__init__("File not found")


@dataclass(frozen=True)
class MediaFile:
    """A media file the caller may read."""

    path: Path
    file_name: str
    media_type: str


def owner_prefix(user_id: int) -> str:
    """Uploaded files are named ``<user_id>_<rest>``."""
    return f"{user_id}_"


async def resolve_media_file(
    db: AsyncSession,
    user_id: int,
    file_name: str,
    settings: Settings,
) -> MediaFile:
    """
    Resolve a requested media file name for the verified caller.

    Checks, in order: the name carries the caller's owner prefix, the file
    exists in the media directory, one of the caller's bookmarks references it
    (url or content equal to the public media path), and its MIME type is in
    the allow-list.

    Raises:
        MediaAccessDeniedError: Prefix mismatch or MIME type not allowed.
        MediaNotFoundError: File or referencing bookmark missing.
    """
    # Path components are discarded: only a plain file name inside the media dir is served
    base_name = PurePosixPath(file_name.replace("\\", "/")).name
    if not base_name or base_name != file_name:
        raise MediaNotFoundError

    if not base_name.startswith(owner_prefix(user_id)):
        logger.warning("User %s requested media file %r of another owner", user_id, base_name)
        raise MediaAccessDeniedError

    path = settings.media_dir / base_name
    if not path.is_file():
        raise MediaNotFoundError

    public_path = f"{settings.media_url_prefix}{base_name}"
    result = await db.execute(
        select(Bookmark.id)
        .where(
            Bookmark.user_id == user_id,
            or_(Bookmark.url == public_path, Bookmark.content == public_path),
        )
        .limit(1),
    )
    if result.first() is None:
        raise MediaNotFoundError

    media_type, _ = mimetypes.guess_type(base_name)
    if media_type is None or media_type.lower() not in settings.allowed_media_types:
        raise MediaAccessDeniedError

    return MediaFile(path=path, file_name=base_name, media_type=media_type)
