"""Owner-checked media file endpoint."""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user_id, get_settings
from core.config import Settings
from schemas.common import error_responses
from services.media_service import (
    MediaAccessDeniedError,
    MediaNotFoundError,
    resolve_media_file,
)

router = APIRouter(prefix="/media", tags=["media"])


@router.get(
    "/{file_name}",
    response_class=FileResponse,
    responses=error_responses(401, 403, 404),
)
async def get_media(
    file_name: str,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> FileResponse:
    """
    Serve an uploaded audio/video file inline.

    Identity may be passed as ``user_id`` / ``user_email`` query parameters,
    since ``<audio>`` and ``<video>`` elements cannot send headers.
    """
    try:
        media = await resolve_media_file(db, user_id, file_name, settings)
    except MediaAccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except MediaNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    return FileResponse(
        media.path,
        media_type=media.media_type,
        filename=media.file_name,
        content_disposition_type="inline",
    )
