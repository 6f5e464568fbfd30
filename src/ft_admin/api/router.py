# src/ft_admin/api/router.py
"""Admin REST API. Every route requires the admin role."""
import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_admin.application.schemas import (
    AdminCreateUserRequest,
    AdminTransactionSort,
    RoleUpdateRequest,
)
from src.ft_admin.application.service import AdminService
from src.ft_cache.api.dependencies import cached_endpoint, get_cache_invalidator
from src.ft_cache.application.invalidation import CacheInvalidator
from src.ft_cache.domain.ttl import (
    ADMIN_STATS_TTL,
    ADMIN_TRANSACTION_LIST_TTL,
    ADMIN_USER_DETAIL_TTL,
    ADMIN_USER_LIST_TTL,
)
from src.ft_common.database import get_db_session
from src.ft_common.enums import SortOrder, TransactionType, UserRole
from src.ft_common.response import ApiResponse, success_response
from src.ft_gateway.api.router import get_request_id
from src.ft_gateway.auth.dependencies import require_admin
from src.ft_gateway.user.db_models import UserModel
from src.ft_transaction.application.schemas import TransactionWriteRequest

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Request,
    body: AdminCreateUserRequest,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    invalidator: Annotated[CacheInvalidator, Depends(get_cache_invalidator)],
) -> ApiResponse:
    user = await _service.create_user(db, invalidator, body)
    resp = success_response(user.model_dump(mode="json"), message="User created successfully")
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.get("/users")
@cached_endpoint(ttl=ADMIN_USER_LIST_TTL)
async def list_users(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    role: UserRole | None = Query(None),
    search: str | None = Query(None, max_length=100),
) -> ApiResponse:
    result = await _service.list_users(db, page, limit, role, (search or "").strip() or None)
    resp = success_response(result)
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.get("/users/{user_id}")
@cached_endpoint(ttl=ADMIN_USER_DETAIL_TTL)
async def get_user(
    user_id: uuid.UUID,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_user(db, user_id)
    resp = success_response(result)
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.put("/users/{user_id}/role")
async def update_user_role(
    user_id: uuid.UUID,
    request: Request,
    body: RoleUpdateRequest,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    invalidator: Annotated[CacheInvalidator, Depends(get_cache_invalidator)],
) -> ApiResponse:
    user = await _service.update_role(db, invalidator, str(current_user.id), user_id, body.role)
    resp = success_response(user.model_dump(mode="json"), message="User role updated successfully")
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: uuid.UUID,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    invalidator: Annotated[CacheInvalidator, Depends(get_cache_invalidator)],
) -> ApiResponse:
    await _service.delete_user(db, invalidator, str(current_user.id), user_id)
    resp = success_response(message="User deleted successfully")
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.get("/stats")
@cached_endpoint(ttl=ADMIN_STATS_TTL)
async def system_stats(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    resp = success_response(await _service.system_stats(db))
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.post("/users/{user_id}/transactions", status_code=status.HTTP_201_CREATED)
async def create_transaction_for_user(
    user_id: uuid.UUID,
    request: Request,
    body: TransactionWriteRequest,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    invalidator: Annotated[CacheInvalidator, Depends(get_cache_invalidator)],
) -> ApiResponse:
    tx, username = await _service.create_transaction_for_user(
        db, invalidator, str(current_user.id), user_id, body
    )
    resp = success_response(
        {**tx.model_dump(mode="json"), "username": username},
        message=f"Transaction created successfully for user {username}",
    )
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.get("/transactions")
@cached_endpoint(ttl=ADMIN_TRANSACTION_LIST_TTL)
async def list_all_transactions(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str | None = Query(None, max_length=100),
    type: TransactionType | None = Query(None),
    category_id: int | None = Query(None, ge=1),
    user_id: uuid.UUID | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    sort_by: AdminTransactionSort = Query(AdminTransactionSort.TRANSACTION_DATE),
    sort_order: SortOrder = Query(SortOrder.DESC),
) -> ApiResponse:
    result = await _service.list_all_transactions(
        db,
        page,
        limit,
        sort_by=sort_by,
        sort_order=sort_order,
        user_id=user_id,
        tx_type=type.value if type else None,
        category_id=category_id,
        start_date=start_date,
        end_date=end_date,
        search=(search or "").strip() or None,
    )
    resp = success_response(result)
    resp.request_id = get_request_id(request, resp.request_id)
    return resp
