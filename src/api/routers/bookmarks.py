"""Bookmark CRUD endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user_id
from api.helpers import json_body_openapi, parse_json_body
from schemas.bookmark import BookmarkCreate, BookmarkResponse, BookmarkUpdate
from schemas.common import ApiResponse, error_responses
from services import bookmark_service
from services.exceptions import NotFoundError, ValidationError

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.get(
    "/",
    response_model=ApiResponse[list[BookmarkResponse]],
    responses=error_responses(400, 401),
)
async def list_bookmarks(
    collection_id: int | None = Query(default=None, description="Only bookmarks in this collection"),  # noqa: E501
    search: str | None = Query(default=None, description="Substring match on title, description and content (case-insensitive)"),  # noqa: E501
    tag: str | None = Query(default=None, description="Only bookmarks carrying this exact tag"),
    favorite: bool | None = Query(default=None, description="Filter by favorite flag"),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[list[BookmarkResponse]]:
    """
    List the current user's bookmarks, newest first.

    - **collection_id**: exact collection match
    - **search**: case-insensitive substring across title, description and content
    - **tag**: exact, case-sensitive tag name
    - **favorite**: true / false
    """
    bookmarks = await bookmark_service.search_bookmarks(
        db=db,
        user_id=user_id,
        collection_id=collection_id,
        favorite=favorite,
        search=search,
        tag=tag,
    )
    return ApiResponse[list[BookmarkResponse]](data=bookmarks)


@router.post(
    "/",
    response_model=ApiResponse[BookmarkResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 404),
)
async def create_bookmark(
    data: BookmarkCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[BookmarkResponse]:
    """Create a bookmark. Tags are created on first use."""
    try:
        bookmark = await bookmark_service.create_bookmark(db, user_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return ApiResponse[BookmarkResponse](data=bookmark, message="Bookmark created successfully")


@router.get(
    "/{bookmark_id}",
    response_model=ApiResponse[BookmarkResponse],
    responses=error_responses(401, 404),
)
async def get_bookmark(
    bookmark_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[BookmarkResponse]:
    """Get a single bookmark by ID."""
    try:
        bookmark = await bookmark_service.get_bookmark_detail(db, user_id, bookmark_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return ApiResponse[BookmarkResponse](data=bookmark)


@router.patch(
    "/{bookmark_id}",
    response_model=ApiResponse[BookmarkResponse],
    responses=error_responses(400, 401, 404),
    openapi_extra=json_body_openapi(BookmarkUpdate),
)
@router.put(
    "/{bookmark_id}",
    response_model=ApiResponse[BookmarkResponse],
    responses=error_responses(400, 401, 404),
    openapi_extra=json_body_openapi(BookmarkUpdate),
)
async def update_bookmark(
    bookmark_id: int,
    request: Request,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[BookmarkResponse]:
    """
    Partially update a bookmark. Only fields present in the body change.

    Ownership is checked before the body is read, so a foreign bookmark is a
    404 whatever the body contains. ``tags`` replaces the whole tag set.
    """
    if await bookmark_service.get_bookmark(db, user_id, bookmark_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bookmark not found")

    data = await parse_json_body(request, BookmarkUpdate)
    try:
        bookmark = await bookmark_service.update_bookmark(db, user_id, bookmark_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return ApiResponse[BookmarkResponse](data=bookmark, message="Bookmark updated successfully")


@router.delete(
    "/{bookmark_id}",
    response_model=ApiResponse[None],
    responses=error_responses(401, 404),
)
async def delete_bookmark(
    bookmark_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[None]:
    """Delete a bookmark together with its tag links and canvas placements."""
    try:
        await bookmark_service.delete_bookmark(db, user_id, bookmark_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return ApiResponse[None](message="Bookmark deleted successfully")
