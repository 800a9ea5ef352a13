"""
Application review endpoints.

Admins browse submitted applications and download the attached résumé.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_pagination_params, get_storage, require_admin
from api.schemas.applications import ApplicationDetail, ApplicationListItem
from api.schemas.common import PaginatedResponse, PaginationParams
from api.services import applications as application_service
from core.security import AdminIdentity
from core.storage.s3 import S3Storage
from database.engine import get_db

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get(
    "",
    response_model=PaginatedResponse[ApplicationListItem],
    summary="List Applications",
    description="Applications, newest first, with candidate and position summaries.",
)
async def list_applications(
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[AdminIdentity] = Depends(require_admin),
):
    result = await application_service.list_applications(db, pagination)
    return PaginatedResponse[ApplicationListItem].create(
        data=[ApplicationListItem.model_validate(application) for application in result["data"]],
        total=result["total"],
        pagination=pagination,
    )


@router.get(
    "/{application_id}",
    response_model=ApplicationDetail,
    summary="Get Application",
    description="Application detail with the résumé re-encoded as base64 (null if storage is unavailable).",
)
async def get_application(
    application_id: int = Path(..., description="Application ID"),
    db: AsyncSession = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
    current_admin: Optional[AdminIdentity] = Depends(require_admin),
):
    return await application_service.get_application(db, storage, application_id)
