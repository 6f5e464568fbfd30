"""ft_transaction REST endpoints.

GET    /transactions             — paginated list with filters and search
GET    /transactions/summary     — per-type totals and net for a date range
GET    /transactions/{id}        — single transaction (owner or admin)
POST   /transactions             — create (write access)
PUT    /transactions/{id}        — replace (write access, owner or admin)
DELETE /transactions/{id}        — delete (write access, owner or admin)

Admins read another user's ledger with ?user_id=<uuid>.
"""

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_cache.api.dependencies import cached_endpoint, get_cache_invalidator
from src.ft_cache.application.invalidation import CacheInvalidator
from src.ft_cache.domain.ttl import (
    TRANSACTION_ITEM_TTL,
    TRANSACTION_LIST_TTL,
    TRANSACTION_SUMMARY_TTL,
)
from src.ft_common.database import get_db_session
from src.ft_common.enums import TransactionType
from src.ft_common.response import ApiResponse, success_response
from src.ft_gateway.api.router import get_request_id
from src.ft_gateway.auth.dependencies import (
    get_current_user,
    require_write_access,
    resolve_target_user_id,
)
from src.ft_gateway.user.db_models import UserModel
from src.ft_transaction.application.schemas import (
    TransactionCreateRequest,
    TransactionWriteRequest,
)
from src.ft_transaction.application.service import TransactionApplicationService
from src.ft_transaction.domain.models import TransactionFilter

router = APIRouter(prefix="/transactions", tags=["transactions"])

_service = TransactionApplicationService()


@router.get("")
@cached_endpoint(ttl=TRANSACTION_LIST_TTL)
async def list_transactions(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    type: TransactionType | None = Query(None),
    category_id: int | None = Query(None, ge=1),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    search: str | None = Query(None, max_length=100),
    user_id: uuid.UUID | None = Query(None, description="Admin only"),
) -> ApiResponse:
    flt = TransactionFilter(
        user_id=resolve_target_user_id(current_user, user_id),
        type=type.value if type else None,
        category_id=category_id,
        start_date=start_date,
        end_date=end_date,
        search=(search or "").strip() or None,
    )
    result = await _service.list_transactions(db, flt, page, limit)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.get("/summary")
@cached_endpoint(ttl=TRANSACTION_SUMMARY_TTL)
async def transaction_summary(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    user_id: uuid.UUID | None = Query(None, description="Admin only"),
) -> ApiResponse:
    owner_id = resolve_target_user_id(current_user, user_id)
    result = await _service.get_summary(db, owner_id, start_date, end_date)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.get("/{transaction_id}")
@cached_endpoint(ttl=TRANSACTION_ITEM_TTL)
async def get_transaction(
    transaction_id: int,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_transaction(
        db, str(current_user.id), current_user.is_admin, transaction_id
    )
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_transaction(
    request: Request,
    body: TransactionCreateRequest,
    current_user: Annotated[UserModel, Depends(require_write_access)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    invalidator: Annotated[CacheInvalidator, Depends(get_cache_invalidator)],
) -> ApiResponse:
    owner_id = resolve_target_user_id(current_user, body.user_id)
    result = await _service.create_transaction(
        db, invalidator, str(current_user.id), owner_id, body
    )
    resp = success_response(result.model_dump(mode="json"), message="Transaction created")
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.put("/{transaction_id}")
async def update_transaction(
    transaction_id: int,
    request: Request,
    body: TransactionWriteRequest,
    current_user: Annotated[UserModel, Depends(require_write_access)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    invalidator: Annotated[CacheInvalidator, Depends(get_cache_invalidator)],
) -> ApiResponse:
    result = await _service.update_transaction(
        db, invalidator, str(current_user.id), current_user.is_admin, transaction_id, body
    )
    resp = success_response(result.model_dump(mode="json"), message="Transaction updated")
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: int,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_write_access)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    invalidator: Annotated[CacheInvalidator, Depends(get_cache_invalidator)],
) -> ApiResponse:
    await _service.delete_transaction(
        db, invalidator, str(current_user.id), current_user.is_admin, transaction_id
    )
    resp = success_response(message="Transaction deleted")
    resp.request_id = get_request_id(request, resp.request_id)
    return resp
