"""Collection tree endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user_id
from schemas.collection import (
    CollectionCreate,
    CollectionResponse,
    CollectionTreeNode,
    CollectionUpdate,
)
from schemas.common import ApiResponse, error_responses
from services import collection_service
from services.exceptions import NotFoundError, ValidationError

router = APIRouter(prefix="/collections", tags=["collections"])


@router.get(
    "/",
    response_model=ApiResponse[list[CollectionTreeNode]],
    responses=error_responses(401),
)
async def list_collections(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[list[CollectionTreeNode]]:
    """
    Get the current user's collections as a tree.

    Root collections (and the children of each node) are sorted by name. Each
    node carries ``bookmark_count``, the number of bookmarks directly in it.
    """
    tree = await collection_service.list_collection_tree(db, user_id)
    return ApiResponse[list[CollectionTreeNode]](data=tree)


@router.post(
    "/",
    response_model=ApiResponse[CollectionResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 404),
)
async def create_collection(
    data: CollectionCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[CollectionResponse]:
    """Create a collection, optionally under an existing parent."""
    try:
        collection = await collection_service.create_collection(db, user_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return ApiResponse[CollectionResponse](
        data=collection, message="Collection created successfully",
    )


@router.patch(
    "/{collection_id}",
    response_model=ApiResponse[CollectionResponse],
    responses=error_responses(400, 401, 404),
)
@router.put(
    "/{collection_id}",
    response_model=ApiResponse[CollectionResponse],
    responses=error_responses(400, 401, 404),
)
async def update_collection(
    collection_id: int,
    data: CollectionUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[CollectionResponse]:
    """
    Rename and/or move a collection.

    Returns 404 if the collection (or a new parent) is not found, and 400 when
    the body has no fields or the move would put a collection inside itself.
    """
    try:
        collection = await collection_service.update_collection(
            db, user_id, collection_id, data,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return ApiResponse[CollectionResponse](
        data=collection, message="Collection updated successfully",
    )


@router.delete(
    "/{collection_id}",
    response_model=ApiResponse[None],
    responses=error_responses(401, 404),
)
async def delete_collection(
    collection_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[None]:
    """
    Delete a collection and its canvas.

    Bookmarks in it are kept and show up as uncategorized.
    """
    try:
        await collection_service.delete_collection(db, user_id, collection_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return ApiResponse[None](message="Collection deleted successfully")
