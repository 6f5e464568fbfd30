"""ft_category REST endpoints.

GET    /categories              — all categories, optional ?type=income|expense
GET    /categories/stats        — usage per category across all users (admin)
GET    /categories/{id}         — single category
POST   /categories              — create (admin)
PUT    /categories/{id}         — replace (admin)
DELETE /categories/{id}         — delete if unused (admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_cache.api.dependencies import cached_endpoint, get_cache_invalidator
from src.ft_cache.application.invalidation import CacheInvalidator
from src.ft_cache.domain.ttl import CATEGORY_STATS_TTL, CATEGORY_TTL
from src.ft_category.application.schemas import CategoryWriteRequest
from src.ft_category.application.service import CategoryApplicationService
from src.ft_common.database import get_db_session
from src.ft_common.enums import TransactionType
from src.ft_common.response import ApiResponse, success_response
from src.ft_gateway.api.router import get_request_id
from src.ft_gateway.auth.dependencies import get_current_user, require_admin
from src.ft_gateway.user.db_models import UserModel

router = APIRouter(prefix="/categories", tags=["categories"])

_service = CategoryApplicationService()


@router.get("")
@cached_endpoint(ttl=CATEGORY_TTL)
async def list_categories(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    type: TransactionType | None = Query(None, description="income or expense"),
) -> ApiResponse:
    items = await _service.list_categories(db, type.value if type else None)
    resp = success_response([c.model_dump(mode="json") for c in items])
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


# Declared before /{category_id} so "stats" is not parsed as an id.
@router.get("/stats")
@cached_endpoint(ttl=CATEGORY_STATS_TTL)
async def category_stats(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    items = await _service.get_stats(db)
    resp = success_response([c.model_dump(mode="json") for c in items])
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.get("/{category_id}")
@cached_endpoint(ttl=CATEGORY_TTL)
async def get_category(
    category_id: int,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    category = await _service.get_category(db, category_id)
    resp = success_response(category.model_dump(mode="json"))
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(
    request: Request,
    body: CategoryWriteRequest,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    invalidator: Annotated[CacheInvalidator, Depends(get_cache_invalidator)],
) -> ApiResponse:
    category = await _service.create_category(db, invalidator, body)
    resp = success_response(category.model_dump(mode="json"), message="Category created")
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.put("/{category_id}")
async def update_category(
    category_id: int,
    request: Request,
    body: CategoryWriteRequest,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    invalidator: Annotated[CacheInvalidator, Depends(get_cache_invalidator)],
) -> ApiResponse:
    category = await _service.update_category(db, invalidator, category_id, body)
    resp = success_response(category.model_dump(mode="json"), message="Category updated")
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    invalidator: Annotated[CacheInvalidator, Depends(get_cache_invalidator)],
) -> ApiResponse:
    await _service.delete_category(db, invalidator, category_id)
    resp = success_response(message="Category deleted")
    resp.request_id = get_request_id(request, resp.request_id)
    return resp
