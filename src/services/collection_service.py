"""Service layer for the collection tree."""
import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from models.canvas import CanvasConnection, CanvasPosition
from models.collection import Collection
from schemas.collection import (
    CollectionCreate,
    CollectionResponse,
    CollectionTreeNode,
    CollectionUpdate,
)
from services.exceptions import (
    CollectionCycleError,
    CollectionNotFoundError,
    InvalidParentCollectionError,
    NothingToUpdateError,
)

logger = logging.getLogger(__name__)


async def get_collection(
    db: AsyncSession,
    user_id: int,
    collection_id: int,
) -> Collection | None:
    """Get a collection by ID, scoped to user. Returns None if not found or wrong user."""
    result = await db.execute(
        select(Collection).where(
            Collection.id == collection_id,
            Collection.user_id == user_id,
        ),
    )
    return result.scalar_one_or_none()


async def get_bookmark_counts(db: AsyncSession, user_id: int) -> dict[int, int]:
    """Count the user's bookmarks per collection id (uncategorized bookmarks excluded)."""
    result = await db.execute(
        select(Bookmark.collection_id, func.count(Bookmark.id).label("count"))
        .where(
            Bookmark.user_id == user_id,
            Bookmark.collection_id.is_not(None),
        )
        .group_by(Bookmark.collection_id),
    )
    return {row.collection_id: row.count for row in result}


def _to_response(
    collection: Collection,
    bookmark_count: int,
    model: type[CollectionResponse] = CollectionResponse,
) -> CollectionResponse:
    response = model.model_validate(collection)
    response.bookmark_count = bookmark_count
    return response


def _creates_cycle(child_id: int, parent_id: int, attached: dict[int, int]) -> bool:
    """Would hanging child_id under parent_id close a loop in the attached forest?"""
    current: int | None = parent_id
    while current is not None:
        if current == child_id:
            return True
        current = attached.get(current)
    return False


async def list_collection_tree(
    db: AsyncSession,
    user_id: int,
) -> list[CollectionTreeNode]:
    """
    Return the user's collections as a forest, each node with its bookmark count.

    Siblings are ordered by name. A collection whose parent no longer exists
    (or would form a loop with stored data) is returned as a root; nothing is
    written back.
    """
    result = await db.execute(
        select(Collection)
        .where(Collection.user_id == user_id)
        .order_by(Collection.name, Collection.id),
    )
    collections = list(result.scalars().all())
    counts = await get_bookmark_counts(db, user_id)

    nodes: dict[int, CollectionTreeNode] = {
        collection.id: _to_response(
            collection, counts.get(collection.id, 0), CollectionTreeNode,
        )
        for collection in collections
    }

    # child id -> parent id for every link accepted so far (always acyclic)
    attached: dict[int, int] = {}
    roots: list[CollectionTreeNode] = []
    for collection in collections:
        node = nodes[collection.id]
        parent_id = collection.parent_id
        if (
            parent_id is not None
            and parent_id in nodes
            and not _creates_cycle(collection.id, parent_id, attached)
        ):
            attached[collection.id] = parent_id
            nodes[parent_id].children.append(node)
        else:
            roots.append(node)
    return roots


async def _validate_parent(
    db: AsyncSession,
    user_id: int,
    parent_id: int,
    collection_id: int | None = None,
) -> None:
    """
    Check that parent_id is a collection of the user and, when moving an
    existing collection, that it is not the collection itself or a descendant.

    Raises:
        InvalidParentCollectionError: Parent missing or owned by another user.
        CollectionCycleError: The move would make the collection its own ancestor.
    """
    if collection_id is not None and parent_id == collection_id:
        raise CollectionCycleError(collection_id, parent_id)

    result = await db.execute(
        select(Collection.id, Collection.parent_id).where(Collection.user_id == user_id),
    )
    parents = {row.id: row.parent_id for row in result}
    if parent_id not in parents:
        raise InvalidParentCollectionError(parent_id)
    if collection_id is None:
        return

    # Walk up from the new parent; meeting the moved collection means a cycle
    seen: set[int] = set()
    current: int | None = parent_id
    while current is not None and current in parents and current not in seen:
        if current == collection_id:
            raise CollectionCycleError(collection_id, parent_id)
        seen.add(current)
        current = parents[current]


async def create_collection(
    db: AsyncSession,
    user_id: int,
    data: CollectionCreate,
) -> CollectionResponse:
    """
    Create a collection, optionally nested under one of the user's collections.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    if data.parent_id is not None:
        await _validate_parent(db, user_id, data.parent_id)

    collection = Collection(user_id=user_id, name=data.name, parent_id=data.parent_id)
    db.add(collection)
    await db.flush()
    await db.refresh(collection)
    return _to_response(collection, 0)


async def update_collection(
    db: AsyncSession,
    user_id: int,
    collection_id: int,
    data: CollectionUpdate,
) -> CollectionResponse:
    """
    Rename and/or move a collection. Only fields present in ``data`` are applied.

    Raises:
        CollectionNotFoundError: Collection missing or owned by another user.
        NothingToUpdateError: Neither name nor parent_id was supplied.
        InvalidParentCollectionError / CollectionCycleError: Bad new parent.
    """
    collection = await get_collection(db, user_id, collection_id)
    if collection is None:
        raise CollectionNotFoundError(collection_id)

    updates = data.field_updates()
    if not updates:
        raise NothingToUpdateError

    new_parent_id = updates.get("parent_id")
    if new_parent_id is not None and new_parent_id != collection.parent_id:
        await _validate_parent(db, user_id, new_parent_id, collection_id)

    for field, value in updates.items():
        setattr(collection, field, value)

    await db.flush()
    await db.refresh(collection)
    counts = await get_bookmark_counts(db, user_id)
    return _to_response(collection, counts.get(collection.id, 0))


async def delete_collection(
    db: AsyncSession,
    user_id: int,
    collection_id: int,
) -> None:
    """
    Delete a collection and its canvas overlay.

    Bookmarks are not touched: they keep the stale collection_id and read back
    as uncategorized. Child collections likewise become roots on the next read.

    Raises:
        CollectionNotFoundError: Collection missing or owned by another user.
    """
    collection = await get_collection(db, user_id, collection_id)
    if collection is None:
        raise CollectionNotFoundError(collection_id)

    await db.execute(
        delete(CanvasConnection).where(CanvasConnection.collection_id == collection_id),
    )
    await db.execute(
        delete(CanvasPosition).where(CanvasPosition.collection_id == collection_id),
    )
    await db.delete(collection)
    await db.flush()
    logger.info("Deleted collection %s for user %s", collection_id, user_id)
