"""
Identity verification for every protected endpoint.

The client sends the ``(user_id, email)`` pair it received at login with each
request, as ``X-User-Id`` / ``X-User-Email`` headers. Inline media elements
cannot set headers, so the ``user_id`` / ``user_email`` query parameters are
accepted as a fallback. The pair is checked against the users table on every
request; there is no session state.
"""
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader, APIKeyQuery
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import get_async_session
from models.user import User

logger = logging.getLogger(__name__)

AUTH_REQUIRED_MESSAGE = "Authentication required. Please log in."

user_id_header = APIKeyHeader(name="X-User-Id", auto_error=False)
user_email_header = APIKeyHeader(name="X-User-Email", auto_error=False)
user_id_query = APIKeyQuery(name="user_id", auto_error=False)
user_email_query = APIKeyQuery(name="user_email", auto_error=False)


def parse_user_id(raw: str | None) -> int | None:
    """Parse a claimed user id. Only positive integers are accepted."""
    if raw is None:
        return None
    try:
        user_id = int(raw.strip())
    except ValueError:
        return None
    return user_id if user_id > 0 else None


async def verify_identity(
    db: AsyncSession,
    raw_user_id: str | None,
    email: str | None,
) -> int | None:
    """
    Check a claimed identity against stored users.

    Args:
        db: Database session.
        raw_user_id: Claimed user id as received (string).
        email: Claimed email as received.

    Returns:
        The user id when a user with exactly this (id, email) pair exists,
        None otherwise. Storage errors are logged and count as a failed check.
    """
    user_id = parse_user_id(raw_user_id)
    email = (email or "").strip()
    if user_id is None or not email:
        return None

    try:
        result = await db.execute(
            select(User.id).where(User.id == user_id, User.email == email),
        )
    except SQLAlchemyError:
        logger.warning("Identity lookup failed for user_id=%s", user_id, exc_info=True)
        return None
    return result.scalar_one_or_none()


async def get_current_user_id(
    header_user_id: str | None = Depends(user_id_header),
    header_email: str | None = Depends(user_email_header),
    query_user_id: str | None = Depends(user_id_query),
    query_email: str | None = Depends(user_email_query),
    db: AsyncSession = Depends(get_async_session),
) -> int:
    """
    Resolve the verified user id for the current request.

    Each value is taken from its header, or from the query string when the
    header is absent.

    Raises:
        HTTPException: 401 with the same message for every kind of failure.
    """
    raw_user_id = header_user_id if header_user_id is not None else query_user_id
    email = header_email if header_email is not None else query_email

    user_id = await verify_identity(db, raw_user_id, email)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTH_REQUIRED_MESSAGE,
        )
    return user_id
