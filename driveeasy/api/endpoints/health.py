"""Liveness probe."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from driveeasy.api.deps import get_db
from driveeasy.core.config import settings
from driveeasy.schemas.common import ApiResponse, HealthData

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=ApiResponse[HealthData])
async def health(db: AsyncSession = Depends(get_db)) -> ApiResponse:
    """Public health check: reports DB connectivity."""
    database = False
    try:
        await db.execute(select(1))
        database = True
    except SQLAlchemyError as e:
        logger.error("Health check DB failure: %s", e)

    return ApiResponse(
        message="Server is running",
        data=HealthData(
            timestamp=datetime.now(timezone.utc).isoformat(),
            environment=settings.ENVIRONMENT,
            database=database,
        ),
    )
