"""
Position endpoints.

Listing and reading positions and applying to them are public; creating,
updating and deleting positions requires an admin.
"""

import json
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_pagination_params, get_storage, require_admin
from api.schemas.applications import ApplicationCreated
from api.schemas.common import PaginatedResponse, PaginationParams
from api.schemas.positions import (
    PositionCreate,
    PositionDetail,
    PositionListItem,
    PositionUpdate,
)
from api.services import applications as application_service
from api.services import positions as position_service
from core.errors import BadRequestError
from core.security import AdminIdentity, AuditAction, ResourceType, audit_log, log_audit_event
from core.storage.s3 import S3Storage
from database.engine import get_db

router = APIRouter(prefix="/positions", tags=["Positions"])


@router.post(
    "",
    response_model=PositionDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Create Position",
)
@audit_log(AuditAction.CREATE, ResourceType.POSITION)
async def create_position(
    data: PositionCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[AdminIdentity] = Depends(require_admin),
):
    return await position_service.create_position(db, data, current_admin)


@router.get(
    "",
    response_model=PaginatedResponse[PositionListItem],
    summary="List Positions",
    description="Active positions, newest first, optionally filtered by category.",
)
async def list_positions(
    category: Optional[str] = Query(None, description="Filter by category"),
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_db),
):
    result = await position_service.list_positions(db, pagination, category)
    return PaginatedResponse[PositionListItem].create(
        data=[PositionListItem.model_validate(position) for position in result["data"]],
        total=result["total"],
        pagination=pagination,
    )


@router.get(
    "/{position_id}",
    response_model=PositionDetail,
    summary="Get Position",
)
async def get_position(
    position_id: int = Path(..., description="Position ID"),
    db: AsyncSession = Depends(get_db),
):
    return await position_service.get_active_position(db, position_id)


@router.put(
    "/{position_id}",
    response_model=PositionDetail,
    summary="Update Position",
)
@audit_log(AuditAction.UPDATE, ResourceType.POSITION, "position_id")
async def update_position(
    data: PositionUpdate,
    position_id: int = Path(..., description="Position ID"),
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[AdminIdentity] = Depends(require_admin),
):
    return await position_service.update_position(db, position_id, data)


@router.delete(
    "/{position_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Position",
    description="Soft-delete a position. It disappears from every read.",
)
@audit_log(AuditAction.DELETE, ResourceType.POSITION, "position_id")
async def delete_position(
    position_id: int = Path(..., description="Position ID"),
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[AdminIdentity] = Depends(require_admin),
):
    await position_service.delete_position(db, position_id)


@router.post(
    "/{position_id}/apply",
    response_model=ApplicationCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Apply To Position",
    description=(
        "Submit an application with a base64 encoded PDF résumé (max 2 MiB). "
        "The body is only validated once the position is known to exist."
    ),
)
async def apply_to_position(
    request: Request,
    position_id: int = Path(..., description="Position ID"),
    db: AsyncSession = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
):
    # Parsed by hand so a missing position wins over an invalid body
    raw_body = await request.body()
    try:
        payload = json.loads(raw_body) if raw_body else {}
    except (UnicodeDecodeError, json.JSONDecodeError):
        payload = None

    if payload is None:
        await position_service.get_active_position(db, position_id)
        raise BadRequestError("Request body must be valid JSON")

    application = await application_service.submit_application(db, storage, position_id, payload)
    log_audit_event(
        action=AuditAction.APPLY,
        resource_type=ResourceType.APPLICATION,
        resource_id=application.id,
        details={"position_id": position_id, "candidate_id": application.candidate_id},
    )
    return application
