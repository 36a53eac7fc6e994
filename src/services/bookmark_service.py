"""Service layer for bookmark CRUD operations."""
import logging

from sqlalchemy import Select, and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import utc_now
from models.bookmark import Bookmark
from models.collection import Collection
from schemas.bookmark import BookmarkCreate, BookmarkResponse, BookmarkUpdate
from services import tag_service
from services.collection_service import get_collection
from services.exceptions import (
    BookmarkNotFoundError,
    InvalidCollectionError,
    NothingToUpdateError,
)
from services.utils import escape_ilike

logger = logging.getLogger(__name__)


def _bookmarks_with_collection_name(user_id: int) -> Select:
    """
    Owner-scoped select of (Bookmark, collection name).

    The join also requires the collection to belong to the same user, so a
    dangling or foreign collection_id resolves to a null name.
    """
    return (
        select(Bookmark, Collection.name.label("collection_name"))
        .outerjoin(
            Collection,
            and_(
                Collection.id == Bookmark.collection_id,
                Collection.user_id == Bookmark.user_id,
            ),
        )
        .where(Bookmark.user_id == user_id)
    )


async def _assemble(
    db: AsyncSession,
    rows: list[tuple[Bookmark, str | None]],
) -> list[BookmarkResponse]:
    """Attach resolved tag names and collection name to each bookmark row."""
    tag_names = await tag_service.get_tag_names_for_bookmarks(
        db, (bookmark.id for bookmark, _ in rows),
    )
    responses = []
    for bookmark, collection_name in rows:
        response = BookmarkResponse.model_validate(bookmark)
        response.tags = tag_names.get(bookmark.id, [])
        response.collection_name = collection_name
        responses.append(response)
    return responses


async def _ensure_collection_owned(
    db: AsyncSession,
    user_id: int,
    collection_id: int,
) -> None:
    if await get_collection(db, user_id, collection_id) is None:
        raise InvalidCollectionError(collection_id)


async def get_bookmark(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
) -> Bookmark | None:
    """Get a bookmark by ID, scoped to user. Returns None if not found or wrong user."""
    result = await db.execute(
        select(Bookmark).where(
            Bookmark.id == bookmark_id,
            Bookmark.user_id == user_id,
        ),
    )
    return result.scalar_one_or_none()


async def get_user_bookmark_ids(db: AsyncSession, user_id: int) -> list[int]:
    """IDs of every bookmark the user owns."""
    result = await db.execute(select(Bookmark.id).where(Bookmark.user_id == user_id))
    return list(result.scalars().all())


async def get_bookmark_detail(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
) -> BookmarkResponse:
    """
    Get a fully assembled bookmark (tags and collection name resolved).

    Raises:
        BookmarkNotFoundError: Bookmark missing or owned by another user.
    """
    result = await db.execute(
        _bookmarks_with_collection_name(user_id).where(Bookmark.id == bookmark_id),
    )
    row = result.first()
    if row is None:
        raise BookmarkNotFoundError(bookmark_id)
    return (await _assemble(db, [tuple(row)]))[0]


async def search_bookmarks(
    db: AsyncSession,
    user_id: int,
    collection_id: int | None = None,
    favorite: bool | None = None,
    search: str | None = None,
    tag: str | None = None,
) -> list[BookmarkResponse]:
    """
    List a user's bookmarks, newest first.

    Args:
        db: Database session.
        user_id: Owner; always applied.
        collection_id: Exact collection match.
        favorite: Exact favorite flag match.
        search: Case-insensitive substring matched against title,
            description or content.
        tag: Keep only bookmarks whose tag set contains this exact
            (case-sensitive) name. Applied after tags are resolved.

    Returns:
        Assembled bookmarks ordered by created_at desc.
    """
    query = _bookmarks_with_collection_name(user_id)

    if collection_id is not None:
        query = query.where(Bookmark.collection_id == collection_id)

    if favorite is not None:
        query = query.where(Bookmark.favorite.is_(favorite))

    search = (search or "").strip()
    if search:
        search_pattern = f"%{escape_ilike(search)}%"
        query = query.where(
            or_(
                Bookmark.title.ilike(search_pattern, escape="\\"),
                Bookmark.description.ilike(search_pattern, escape="\\"),
                Bookmark.content.ilike(search_pattern, escape="\\"),
            ),
        )

    query = query.order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
    result = await db.execute(query)
    bookmarks = await _assemble(db, [tuple(row) for row in result.all()])

    tag = (tag or "").strip()
    if tag:
        bookmarks = [bookmark for bookmark in bookmarks if tag in bookmark.tags]
    return bookmarks


async def create_bookmark(
    db: AsyncSession,
    user_id: int,
    data: BookmarkCreate,
) -> BookmarkResponse:
    """
    Create a bookmark and attach its tags.

    Raises:
        InvalidCollectionError: collection_id is not one of the user's collections.

    Note: Does not commit. Caller (session generator) handles commit at request end,
    so the bookmark and its tag links are stored together or not at all.
    """
    if data.collection_id is not None:
        await _ensure_collection_owned(db, user_id, data.collection_id)

    bookmark = Bookmark(
        user_id=user_id,
        collection_id=data.collection_id,
        title=data.title,
        url=data.url,
        type=data.type,
        content=data.content,
        description=data.description,
        favorite=data.favorite,
    )
    db.add(bookmark)
    await db.flush()

    if data.tags:
        await tag_service.set_bookmark_tags(db, user_id, bookmark.id, data.tags)

    return await get_bookmark_detail(db, user_id, bookmark.id)


async def update_bookmark(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
    data: BookmarkUpdate,
) -> BookmarkResponse:
    """
    Apply a partial update. Fields absent from the request are left untouched;
    a ``tags`` list replaces the whole tag set.

    Raises:
        BookmarkNotFoundError: Bookmark missing or owned by another user.
        NothingToUpdateError: No recognized fields and no tags list.
        InvalidCollectionError: New collection_id is not one of the user's collections.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = await get_bookmark(db, user_id, bookmark_id)
    if bookmark is None:
        raise BookmarkNotFoundError(bookmark_id)

    updates = data.field_updates()
    if not updates and data.tags is None:
        raise NothingToUpdateError

    new_collection_id = updates.get("collection_id")
    if new_collection_id is not None and new_collection_id != bookmark.collection_id:
        await _ensure_collection_owned(db, user_id, new_collection_id)

    for field, value in updates.items():
        setattr(bookmark, field, value)
    bookmark.updated_at = utc_now()

    if data.tags is not None:
        await tag_service.replace_bookmark_tags(db, user_id, bookmark.id, data.tags)

    await db.flush()
    return await get_bookmark_detail(db, user_id, bookmark.id)


async def delete_bookmark(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
) -> None:
    """
    Delete a bookmark. Tag links and canvas rows go with it (FK cascade).

    Raises:
        BookmarkNotFoundError: Zero rows matched - the bookmark is missing or
            belongs to another user; the two cases are not distinguished.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    result = await db.execute(
        delete(Bookmark).where(
            Bookmark.id == bookmark_id,
            Bookmark.user_id == user_id,
        ),
    )
    if result.rowcount == 0:
        raise BookmarkNotFoundError(bookmark_id)
