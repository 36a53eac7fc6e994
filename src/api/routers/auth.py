"""Account endpoints: signup, login and identity checks."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user_id
from schemas.common import ApiResponse, error_responses
from schemas.user import AuthCheckResponse, LoginRequest, SignupRequest, UserResponse
from services import user_service
from services.exceptions import ValidationError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400),
)
async def signup(
    data: SignupRequest,
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[UserResponse]:
    """Create an account. Returns 400 if the username or email is taken."""
    try:
        user = await user_service.create_user(db, data)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return ApiResponse[UserResponse](
        data=UserResponse.model_validate(user),
        message="Account created successfully",
    )


@router.post(
    "/login",
    response_model=ApiResponse[UserResponse],
    responses=error_responses(400, 401),
)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[UserResponse]:
    """
    Verify credentials.

    The returned ``user_id`` and ``email`` are what the client sends as
    ``X-User-Id`` / ``X-User-Email`` on later requests.
    """
    user = await user_service.authenticate(db, data.email, data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return ApiResponse[UserResponse](
        data=UserResponse.model_validate(user),
        message="Login successful",
    )


@router.post("/logout", response_model=ApiResponse[None])
async def logout() -> ApiResponse[None]:
    """No server-side session exists; clients drop their stored identity."""
    return ApiResponse[None](message="Logged out successfully")


@router.get(
    "/check",
    response_model=ApiResponse[AuthCheckResponse],
    responses=error_responses(401),
)
async def check(
    user_id: int = Depends(get_current_user_id),
) -> ApiResponse[AuthCheckResponse]:
    """Confirm that the presented identity is valid."""
    return ApiResponse[AuthCheckResponse](data=AuthCheckResponse(user_id=user_id))


@router.get(
    "/user",
    response_model=ApiResponse[UserResponse],
    responses=error_responses(401),
)
async def get_user(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[UserResponse]:
    """Get the current user's profile."""
    user = await user_service.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return ApiResponse[UserResponse](data=UserResponse.model_validate(user))
