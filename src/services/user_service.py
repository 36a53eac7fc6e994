"""Service layer for account signup and login."""
import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.security import hash_password, verify_password
from models.collection import Collection
from models.user import User
from schemas.user import SignupRequest
from services.exceptions import UserAlreadyExistsError

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_NAME = "Unsorted"


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    return await db.get(User, user_id)


async def create_user(db: AsyncSession, data: SignupRequest) -> User:
    """
    Register a user and give them a starter "Unsorted" collection.

    Raises:
        UserAlreadyExistsError: Username or email is already registered,
            including when a concurrent signup wins the race.
    """
    result = await db.execute(
        select(User.id).where(
            or_(User.username == data.username, User.email == data.email),
        ),
    )
    if result.first() is not None:
        raise UserAlreadyExistsError

    try:
        async with db.begin_nested():
            user = User(
                username=data.username,
                email=data.email,
                password_hash=hash_password(data.password),
            )
            db.add(user)
            await db.flush()
    except IntegrityError as e:
        raise UserAlreadyExistsError from e

    db.add(Collection(user_id=user.id, name=DEFAULT_COLLECTION_NAME))
    await db.flush()
    await db.refresh(user)
    logger.info("Created user %s", user.id)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    """Return the user for valid credentials, None otherwise."""
    result = await db.execute(select(User).where(User.email == email.strip()))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user
