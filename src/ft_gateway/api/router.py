"""Auth API router: register, login, refresh, me.

All endpoints return ApiResponse. request_id is read from
request.state (injected by RequestLogMiddleware).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ft_common.database import get_db_session
from src.ft_common.response import ApiResponse, success_response
from src.ft_gateway.auth.dependencies import get_current_user
from src.ft_gateway.user.db_models import UserModel
from src.ft_gateway.user.schemas import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    UserInfo,
)
from src.ft_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = UserService()


def get_request_id(request: Request, fallback: str = "req_unknown") -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", fallback)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="User registration",
)
async def register(
    request: Request,
    body: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    async with db.begin():
        user = await _service.register(
            db, body.username, body.email, body.password, body.first_name, body.last_name
        )

    resp = success_response(
        UserInfo.from_model(user).model_dump(mode="json"),
        message="User registered successfully",
    )
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.post("/login", response_model=ApiResponse, summary="User login")
async def login(
    request: Request,
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user, access_token, refresh_token = await _service.login(db, body.username, body.password)

    data = LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        user=UserInfo.from_model(user),
    )
    resp = success_response(data.model_dump(mode="json"), message="Login successful")
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.post("/refresh", response_model=ApiResponse, summary="Refresh access token")
async def refresh_token(
    request: Request,
    body: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    new_access_token = await _service.refresh(db, body.refresh_token)

    data = RefreshResponse(
        access_token=new_access_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
    )
    resp = success_response(data.model_dump(), message="Token refreshed")
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.get("/me", response_model=ApiResponse, summary="Current user profile")
async def me(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
) -> ApiResponse:
    resp = success_response(UserInfo.from_model(current_user).model_dump(mode="json"))
    resp.request_id = get_request_id(request, resp.request_id)
    return resp
