"""ft_analytics REST endpoints (read-only, cached).

GET /analytics/monthly      — 12-month income/expense overview for a year
GET /analytics/yearly       — per-year totals, newest first
GET /analytics/categories   — per-category breakdown with percentages
GET /analytics/trends       — income vs expense per day/week/month/year
GET /analytics/dashboard    — summary, recent transactions, top categories

Admins report on another user with ?user_id=<uuid>.
"""

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_analytics.application.service import AnalyticsApplicationService
from src.ft_cache.api.dependencies import cached_endpoint
from src.ft_cache.domain.ttl import ANALYTICS_TTL
from src.ft_common.database import get_db_session
from src.ft_common.datetime_utils import utc_now
from src.ft_common.enums import DashboardPeriod, TransactionType, TrendPeriod
from src.ft_common.response import ApiResponse, success_response
from src.ft_gateway.api.router import get_request_id
from src.ft_gateway.auth.dependencies import get_current_user, resolve_target_user_id
from src.ft_gateway.user.db_models import UserModel

router = APIRouter(prefix="/analytics", tags=["analytics"])

_service = AnalyticsApplicationService()


@router.get("/monthly")
@cached_endpoint(ttl=ANALYTICS_TTL)
async def monthly_overview(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    year: int | None = Query(None, ge=1900, le=2100, description="Default: current year"),
    user_id: uuid.UUID | None = Query(None, description="Admin only"),
) -> ApiResponse:
    owner_id = resolve_target_user_id(current_user, user_id)
    result = await _service.monthly(db, owner_id, year or utc_now().year)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.get("/yearly")
@cached_endpoint(ttl=ANALYTICS_TTL)
async def yearly_overview(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    user_id: uuid.UUID | None = Query(None, description="Admin only"),
) -> ApiResponse:
    owner_id = resolve_target_user_id(current_user, user_id)
    result = await _service.yearly(db, owner_id)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.get("/categories")
@cached_endpoint(ttl=ANALYTICS_TTL)
async def category_breakdown(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    type: TransactionType = Query(TransactionType.EXPENSE),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    user_id: uuid.UUID | None = Query(None, description="Admin only"),
) -> ApiResponse:
    owner_id = resolve_target_user_id(current_user, user_id)
    result = await _service.categories(db, owner_id, type, start_date, end_date)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.get("/trends")
@cached_endpoint(ttl=ANALYTICS_TTL)
async def trends(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    period: TrendPeriod = Query(TrendPeriod.MONTHLY),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    user_id: uuid.UUID | None = Query(None, description="Admin only"),
) -> ApiResponse:
    owner_id = resolve_target_user_id(current_user, user_id)
    result = await _service.trends(db, owner_id, period, start_date, end_date)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = get_request_id(request, resp.request_id)
    return resp


@router.get("/dashboard")
@cached_endpoint(ttl=ANALYTICS_TTL)
async def dashboard(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    period: DashboardPeriod = Query(DashboardPeriod.ALL),
    user_id: uuid.UUID | None = Query(None, description="Admin only"),
) -> ApiResponse:
    owner_id = resolve_target_user_id(current_user, user_id)
    result = await _service.dashboard(db, owner_id, period, utc_now().date())
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = get_request_id(request, resp.request_id)
    return resp
