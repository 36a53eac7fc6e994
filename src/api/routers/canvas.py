"""Canvas overlay endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user_id
from schemas.canvas import CanvasResponse, CanvasSave
from schemas.common import ApiResponse, error_responses
from services import canvas_service
from services.exceptions import NotFoundError

router = APIRouter(prefix="/canvas", tags=["canvas"])


@router.get(
    "/{collection_id}",
    response_model=ApiResponse[CanvasResponse],
    responses=error_responses(401),
)
async def get_canvas(
    collection_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[CanvasResponse]:
    """Get node positions and connections of a collection's canvas."""
    canvas = await canvas_service.get_canvas(db, user_id, collection_id)
    return ApiResponse[CanvasResponse](data=canvas)


@router.put(
    "/{collection_id}",
    response_model=ApiResponse[CanvasResponse],
    responses=error_responses(400, 401, 404),
)
@router.post(
    "/{collection_id}",
    response_model=ApiResponse[CanvasResponse],
    responses=error_responses(400, 401, 404),
)
async def save_canvas(
    collection_id: int,
    data: CanvasSave,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[CanvasResponse]:
    """
    Replace the collection's canvas with the submitted positions and connections.

    Entries referencing bookmarks the caller does not own are silently dropped.
    """
    try:
        canvas = await canvas_service.save_canvas(db, user_id, collection_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return ApiResponse[CanvasResponse](data=canvas, message="Canvas saved successfully")
