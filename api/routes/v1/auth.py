"""
Authentication endpoints.

Administrators exchange email and password for a bearer token.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.admins import LoginRequest, LoginResponse
from api.services import admins as admin_service
from database.engine import get_db

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Admin Login",
    description="Authenticate with email and password. Returns a bearer token valid for 9 hours.",
)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    return await admin_service.authenticate_admin(db, credentials.email, credentials.password)
