"""
Public health check.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.db.session import get_db
from employee_api.schemas.health import HealthResponse

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Database connectivity."""
    result = HealthResponse(db=False)

    try:
        await db.execute(select(1))
        result.db = True
    except (SQLAlchemyError, OSError) as e:
        logger.error("Health check DB failure: %s", e)

    return result
