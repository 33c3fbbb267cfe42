"""
Admin analytics endpoints.

- POST /api/admin/login: exchange ADMIN_PASSWORD for a session cookie
- POST /api/admin/logout: clear the session cookie
- GET /api/admin/stats: keyword ranking, daily trend and genre list
"""

import asyncio
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from trivia_service.api.auth import ADMIN_COOKIE_NAME, AdminSessionSigner
from trivia_service.api.dependencies import (
    get_async_repository,
    get_session_signer,
    get_settings,
    require_admin,
)
from trivia_service.api.models import ErrorResponse, LoginRequest, LoginResponse, StatsResponse
from trivia_service.config import Settings
from trivia_service.exceptions import AuthenticationError, ConfigurationError
from trivia_service.models.enums import RankingPeriod
from trivia_service.persistence.repository import AsyncKeywordRepository

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed request body"},
        401: {"model": ErrorResponse, "description": "Wrong password"},
        500: {"model": ErrorResponse, "description": "ADMIN_PASSWORD not configured"},
    },
)
async def login(
    body: LoginRequest,
    settings: Settings = Depends(get_settings),
    signer: AdminSessionSigner = Depends(get_session_signer),
) -> JSONResponse:
    """Set the admin_token cookie when the password matches."""
    if not signer.enabled:
        raise ConfigurationError("管理者パスワードが設定されていません。")

    if not signer.check_password(body.password):
        logger.warning("Admin login failed")
        raise AuthenticationError("パスワードが正しくありません。")

    response = JSONResponse(content={"success": True})
    response.set_cookie(
        ADMIN_COOKIE_NAME,
        signer.issue(),
        max_age=signer.ttl_seconds,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
    logger.info("Admin logged in")
    return response


@router.post("/logout", response_model=LoginResponse)
async def logout(settings: Settings = Depends(get_settings)) -> JSONResponse:
    """Clear the admin_token cookie."""
    response = JSONResponse(content={"success": True})
    response.delete_cookie(
        ADMIN_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
    return response


@router.get(
    "/stats",
    response_model=StatsResponse,
    response_model_by_alias=True,
    dependencies=[Depends(require_admin)],
    responses={401: {"model": ErrorResponse, "description": "Not logged in"}},
)
async def stats(
    period: RankingPeriod = Query(default=RankingPeriod.ALL),
    genre: Optional[str] = Query(default=None),
    settings: Settings = Depends(get_settings),
    repository: AsyncKeywordRepository = Depends(get_async_repository),
) -> StatsResponse:
    """
    Keyword analytics for the admin dashboard.

    The ranking covers the requested period, or all time within one genre
    when a genre is given. Trend is always the last TREND_DAYS days.
    """
    genre = genre or None

    ranking, trend, genres = await asyncio.gather(
        repository.rank_keywords(period, settings.RANKING_LIMIT, genre),
        repository.daily_counts(settings.TREND_DAYS),
        repository.list_genres(),
    )

    return StatsResponse(
        ranking=ranking,
        trend=trend,
        genres=genres,
        period=period.value,
        current_genre=genre,
    )
