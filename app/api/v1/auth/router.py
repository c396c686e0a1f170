from fastapi import APIRouter, Depends
from fastapi import status as http_status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser, LoginRequest, PasswordUpdateRequest, RegisterRequest
from app.auth.services import get_profile, login_user, register_user, update_password
from app.core.notifications import Notifier, get_notifier
from app.core.schemas import ApiResponse, success
from app.db.session import get_db

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=ApiResponse,
    status_code=http_status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
) -> ApiResponse:
    token, user = await register_user(db, notifier, payload)
    return success("User registered successfully", token=token, user=user)


@router.post(
    "/login",
    response_model=ApiResponse,
    status_code=http_status.HTTP_200_OK,
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    result = await login_user(db, payload)
    return success(token=result.access_token, token_type=result.token_type, user=result.user)


@router.post("/login-oauth")
async def login_oauth(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    payload = LoginRequest(
        email=form_data.username.strip(),
        password=form_data.password,
    )
    result = await login_user(db, payload)
    return {
        "access_token": result.access_token,
        "token_type": "bearer",
    }


@router.get("/me", response_model=ApiResponse)
async def me(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    profile = await get_profile(db, current_user.id)
    return success(user=profile.user, courses=profile.courses)


@router.put("/update-password", response_model=ApiResponse)
async def change_password(
    payload: PasswordUpdateRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    await update_password(db, current_user.id, payload)
    return success("Password updated successfully")


@router.post("/logout", response_model=ApiResponse)
async def logout(current_user: CurrentUser = Depends(get_current_user)) -> ApiResponse:
    # Tokens are stateless; the client discards its copy
    return success("Logged out successfully")
