"""Service layer for the canvas overlay (node positions and edges per collection)."""
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.canvas import CanvasConnection, CanvasPosition
from schemas.canvas import (
    CanvasConnectionItem,
    CanvasPositionItem,
    CanvasResponse,
    CanvasSave,
)
from services.bookmark_service import get_user_bookmark_ids
from services.collection_service import get_collection
from services.exceptions import CollectionNotFoundError

logger = logging.getLogger(__name__)


async def get_canvas(
    db: AsyncSession,
    user_id: int,
    collection_id: int,
) -> CanvasResponse:
    """
    Read a collection's canvas, restricted to bookmarks the user owns.

    Connections are returned only when both endpoints are owned. A user with
    no bookmarks gets an empty canvas without further queries.
    """
    owned_ids = await get_user_bookmark_ids(db, user_id)
    if not owned_ids:
        return CanvasResponse()

    positions = await db.execute(
        select(CanvasPosition)
        .where(
            CanvasPosition.collection_id == collection_id,
            CanvasPosition.bookmark_id.in_(owned_ids),
        )
        .order_by(CanvasPosition.id),
    )
    connections = await db.execute(
        select(CanvasConnection)
        .where(
            CanvasConnection.collection_id == collection_id,
            CanvasConnection.from_bookmark_id.in_(owned_ids),
            CanvasConnection.to_bookmark_id.in_(owned_ids),
        )
        .order_by(CanvasConnection.id),
    )
    return CanvasResponse(
        positions=[CanvasPositionItem.model_validate(p) for p in positions.scalars()],
        connections=[CanvasConnectionItem.model_validate(c) for c in connections.scalars()],
    )


async def save_canvas(
    db: AsyncSession,
    user_id: int,
    collection_id: int,
    data: CanvasSave,
) -> CanvasResponse:
    """
    Replace a collection's whole canvas with the submitted state.

    1. Delete the collection's positions of owned bookmarks and connections
       leaving an owned bookmark.
    2. Drop submitted positions that reference a bookmark the user does not
       own (for a repeated bookmark the last position wins).
    3. Drop submitted connections unless both endpoints are positioned in the
       saved layout, which also implies both are owned.
    4. Insert what remains.

    Raises:
        CollectionNotFoundError: Collection missing or owned by another user.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    if await get_collection(db, user_id, collection_id) is None:
        raise CollectionNotFoundError(collection_id)

    owned_list = await get_user_bookmark_ids(db, user_id)
    owned_ids = set(owned_list)
    if owned_list:
        await db.execute(
            delete(CanvasPosition).where(
                CanvasPosition.collection_id == collection_id,
                CanvasPosition.bookmark_id.in_(owned_list),
            ),
        )
        await db.execute(
            delete(CanvasConnection).where(
                CanvasConnection.collection_id == collection_id,
                CanvasConnection.from_bookmark_id.in_(owned_list),
            ),
        )

    positions: dict[int, CanvasPositionItem] = {
        item.bookmark_id: item
        for item in data.positions
        if item.bookmark_id in owned_ids
    }
    connections = [
        item
        for item in data.connections
        if item.from_bookmark_id in positions and item.to_bookmark_id in positions
    ]

    dropped = (len(data.positions) - len(positions), len(data.connections) - len(connections))
    if any(dropped):
        logger.debug(
            "Canvas save for collection %s dropped %s positions and %s connections",
            collection_id,
            *dropped,
        )

    db.add_all(
        CanvasPosition(
            bookmark_id=item.bookmark_id,
            collection_id=collection_id,
            x_position=item.x_position,
            y_position=item.y_position,
        )
        for item in positions.values()
    )
    db.add_all(
        CanvasConnection(
            from_bookmark_id=item.from_bookmark_id,
            to_bookmark_id=item.to_bookmark_id,
            collection_id=collection_id,
            label=item.label,
        )
        for item in connections
    )
    await db.flush()
    return await get_canvas(db, user_id, collection_id)
