"""
Administrator management endpoints.

The first administrator can be created without a token and always becomes
a superadmin. Afterwards only superadmins create, update or toggle admins.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_pagination_params, require_admin, require_superadmin
from api.schemas.admins import (
    AdminCreate,
    AdminResponse,
    AdminStatusFilter,
    AdminStatusResponse,
    AdminUpdate,
)
from api.schemas.common import PaginatedResponse, PaginationParams
from api.services import admins as admin_service
from core.security import AdminIdentity, AuditAction, ResourceType, audit_log
from database.engine import get_db

router = APIRouter(prefix="/admins", tags=["Admins"])


@router.post(
    "",
    response_model=AdminResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Admin",
    description="Create an administrator. Open while no admin exists; afterwards requires a superadmin.",
)
@audit_log(AuditAction.CREATE, ResourceType.ADMIN)
async def create_admin(
    data: AdminCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[AdminIdentity] = Depends(require_superadmin),
):
    return await admin_service.create_admin(db, data, current_admin)


@router.get(
    "",
    response_model=PaginatedResponse[AdminResponse],
    summary="List Admins",
    description="Paginated admins filtered by status (active, deleted or all).",
)
async def list_admins(
    status_filter: AdminStatusFilter = Query(AdminStatusFilter.ACTIVE, alias="status"),
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[AdminIdentity] = Depends(require_admin),
):
    result = await admin_service.list_admins(db, pagination, status_filter)
    return PaginatedResponse[AdminResponse].create(
        data=[AdminResponse.model_validate(admin) for admin in result["data"]],
        total=result["total"],
        pagination=pagination,
    )


@router.get(
    "/{admin_id}",
    response_model=AdminResponse,
    summary="Get Admin",
)
async def get_admin(
    admin_id: int = Path(..., description="Admin ID"),
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[AdminIdentity] = Depends(require_admin),
):
    return await admin_service.get_admin(db, admin_id)


@router.put(
    "/{admin_id}",
    response_model=AdminResponse,
    summary="Update Admin",
    description="Partially update an admin's name, email or role. Deleted admins cannot be updated.",
)
@audit_log(AuditAction.UPDATE, ResourceType.ADMIN, "admin_id")
async def update_admin(
    data: AdminUpdate,
    admin_id: int = Path(..., description="Admin ID"),
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[AdminIdentity] = Depends(require_superadmin),
):
    return await admin_service.update_admin(db, admin_id, data)


@router.delete(
    "/{admin_id}",
    response_model=AdminStatusResponse,
    summary="Toggle Admin Status",
    description="Flip an admin between active and deleted.",
)
@audit_log(AuditAction.TOGGLE_STATUS, ResourceType.ADMIN, "admin_id")
async def toggle_admin_status(
    admin_id: int = Path(..., description="Admin ID"),
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[AdminIdentity] = Depends(require_superadmin),
):
    return await admin_service.toggle_admin_status(db, admin_id)
