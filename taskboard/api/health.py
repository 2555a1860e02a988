"""
Health check: liveness + database status
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.context import get_db

router = APIRouter(tags=["health"])
log = structlog.get_logger()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check: verify the database answers"""
    status = {"status": "ok", "database": "ok"}

    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        status["database"] = f"error: {e}"
        status["status"] = "degraded"
        log.error("database health check failed", error=str(e))

    return status
