"""Tag endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user_id
from schemas.common import ApiResponse, error_responses
from schemas.tag import TagCount
from services.tag_service import get_user_tags_with_counts

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get(
    "/",
    response_model=ApiResponse[list[TagCount]],
    responses=error_responses(401),
)
async def list_tags(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[list[TagCount]]:
    """
    Get all tags for the current user with their bookmark counts.

    Results are sorted by count DESC, then name ASC.
    """
    tags = await get_user_tags_with_counts(db, user_id)
    return ApiResponse[list[TagCount]](data=tags)
