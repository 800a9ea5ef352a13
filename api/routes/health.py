"""Health check endpoints."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database.engine import get_db, ping_db

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str


@router.get("/health", response_model=HealthResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint. Fails when the database cannot be reached."""
    try:
        await ping_db(db)
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database health check failed: {str(e)}")
        return JSONResponse(status_code=500, content={"status": "db not ready"})
    return HealthResponse(status="ok")


@router.get("/ready")
async def readiness_check():
    """Readiness check for load balancers."""
    return {"status": "ready"}
