"""Service layer for tag operations."""
from collections.abc import Iterable

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.tag import Tag, bookmark_tags
from schemas.tag import TagCount
from schemas.validators import normalize_tag_names


async def get_tag_by_name(
    db: AsyncSession,
    user_id: int,
    tag_name: str,
) -> Tag | None:
    """
    Get a tag by exact (case-sensitive) name for a user.

    Args:
        db: Database session.
        user_id: User ID to scope the tag.
        tag_name: Name of the tag to find.

    Returns:
        The Tag if found, None otherwise.
    """
    result = await db.execute(
        select(Tag).where(
            Tag.user_id == user_id,
            Tag.name == tag_name,
        ),
    )
    return result.scalar_one_or_none()


async def get_or_create_tag(
    db: AsyncSession,
    user_id: int,
    tag_name: str,
) -> Tag:
    """
    Return the user's tag with this name, creating it if it does not exist.

    The insert runs in a savepoint. If a concurrent request created the same
    (user, name) row between our SELECT and INSERT, the unique constraint
    fires, the savepoint is rolled back and the existing row is returned.

    Args:
        db: Database session.
        user_id: User ID to scope the tag.
        tag_name: Trimmed, non-empty tag name.

    Returns:
        The existing or newly created Tag.
    """
    tag = await get_tag_by_name(db, user_id, tag_name)
    if tag is not None:
        return tag

    try:
        async with db.begin_nested():  # Creates savepoint
            tag = Tag(user_id=user_id, name=tag_name)
            db.add(tag)
            await db.flush()
    except IntegrityError:
        existing = await get_tag_by_name(db, user_id, tag_name)
        if existing is None:
            raise
        return existing
    return tag


async def associate_tag(
    db: AsyncSession,
    bookmark_id: int,
    tag_id: int,
) -> bool:
    """
    Link a bookmark to a tag. Linking an already linked pair is a no-op.

    Returns:
        True if a new link was stored, False if it already existed.
    """
    if await _is_associated(db, bookmark_id, tag_id):
        return False

    try:
        async with db.begin_nested():
            await db.execute(
                insert(bookmark_tags).values(bookmark_id=bookmark_id, tag_id=tag_id),
            )
    except IntegrityError:
        # Lost a race with an identical insert; anything else is a real error
        if not await _is_associated(db, bookmark_id, tag_id):
            raise
        return False
    return True


async def _is_associated(db: AsyncSession, bookmark_id: int, tag_id: int) -> bool:
    result = await db.execute(
        select(bookmark_tags.c.bookmark_id).where(
            bookmark_tags.c.bookmark_id == bookmark_id,
            bookmark_tags.c.tag_id == tag_id,
        ),
    )
    return result.first() is not None


async def set_bookmark_tags(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
    tag_names: list[str],
) -> None:
    """
    Get-or-create each tag and link it to the bookmark.

    Names are trimmed; empty names are skipped. Existing links are kept.

    Args:
        db: Database session.
        user_id: Owner of the bookmark (tags are scoped to this user).
        bookmark_id: The bookmark to tag.
        tag_names: Tag names to add.
    """
    for name in normalize_tag_names(tag_names):
        tag = await get_or_create_tag(db, user_id, name)
        await associate_tag(db, bookmark_id, tag.id)


async def replace_bookmark_tags(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
    tag_names: list[str],
) -> None:
    """
    Replace a bookmark's whole tag set.

    Clears existing links and sets new ones. Tags left without bookmarks are
    kept. Both steps share the caller's transaction.
    """
    await db.execute(
        delete(bookmark_tags).where(bookmark_tags.c.bookmark_id == bookmark_id),
    )
    await set_bookmark_tags(db, user_id, bookmark_id, tag_names)


async def get_tag_names_for_bookmarks(
    db: AsyncSession,
    bookmark_ids: Iterable[int],
) -> dict[int, list[str]]:
    """
    Resolve tag names for a batch of bookmarks.

    Returns:
        Mapping of bookmark id to its tag names sorted alphabetically.
        Bookmarks without tags map to an empty list.
    """
    ids = list(bookmark_ids)
    names: dict[int, list[str]] = {bookmark_id: [] for bookmark_id in ids}
    if not ids:
        return names

    result = await db.execute(
        select(bookmark_tags.c.bookmark_id, Tag.name)
        .join(Tag, Tag.id == bookmark_tags.c.tag_id)
        .where(bookmark_tags.c.bookmark_id.in_(ids))
        .order_by(Tag.name),
    )
    for row in result:
        names[row.bookmark_id].append(row.name)
    return names


async def get_user_tags_with_counts(
    db: AsyncSession,
    user_id: int,
) -> list[TagCount]:
    """
    Get all tags for a user with their bookmark counts.

    Tags with no bookmarks are included with a count of 0.

    Returns:
        List of TagCount objects sorted by count desc, then name asc.
    """
    # COUNT ignores NULLs from the outer join, so unused tags get count=0
    usage = func.count(bookmark_tags.c.bookmark_id)
    result = await db.execute(
        select(Tag.name, usage.label("count"))
        .outerjoin(bookmark_tags, Tag.id == bookmark_tags.c.tag_id)
        .where(Tag.user_id == user_id)
        .group_by(Tag.id, Tag.name)
        .order_by(usage.desc(), Tag.name.asc()),
    )
    return [TagCount(name=row.name, count=row.count) for row in result]
