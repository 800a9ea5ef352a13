"""Administrator service functions."""

from datetime import timedelta
from typing import Any, Dict, Optional
import logging

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.admins import AdminCreate, AdminStatusFilter, AdminUpdate
from api.schemas.common import PaginationParams
from core.config import settings
from core.errors import (
    BadRequestError,
    ConflictError,
    ErrorCode,
    InternalServerError,
    NotFoundError,
    UnauthorizedError,
)
from core.security import (
    AdminIdentity,
    AuditAction,
    ResourceType,
    create_access_token,
    hash_password,
    log_audit_event,
    verify_password,
)
from database.models.admins import Admin, AdminBootstrap, AdminRole, RecordStatus

logger = logging.getLogger(__name__)

LOGIN_FAILED_MESSAGE = "Incorrect Email or password"


async def count_admins(session: AsyncSession) -> int:
    """Count every admin row, deleted ones included."""
    result = await session.execute(select(func.count()).select_from(Admin))
    return result.scalar_one()


async def get_admin_by_email(session: AsyncSession, email: str) -> Optional[Admin]:
    result = await session.execute(select(Admin).where(Admin.email == email))
    return result.scalar_one_or_none()


async def get_admin(session: AsyncSession, admin_id: int) -> Admin:
    """Get an admin by id, raising NotFoundError when absent."""
    admin = await session.get(Admin, admin_id)
    if admin is None:
        raise NotFoundError("Admin not found")
    return admin


async def _bootstrap_first_admin(session: AsyncSession, data: AdminCreate) -> Admin:
    """
    Create the first administrator.

    The role is always superadmin. The single ``admin_bootstrap`` row is
    inserted in the same transaction, so of two concurrent bootstraps only
    one can commit.
    """
    admin = Admin(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        hashed_password=hash_password(data.password),
        role=AdminRole.SUPERADMIN,
        status=RecordStatus.ACTIVE,
        created_by_admin_id=None,
    )
    session.add(admin)

    try:
        await session.flush()
        session.add(AdminBootstrap(id=1, admin_id=admin.id))
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.warning("Concurrent bootstrap detected; first admin already exists")
        raise UnauthorizedError("Missing authorization header", code=ErrorCode.INVALID_JWT)

    await session.refresh(admin)
    logger.info(f"Bootstrapped first admin {admin.id}")
    return admin


async def create_admin(
    session: AsyncSession,
    data: AdminCreate,
    current_admin: Optional[AdminIdentity],
) -> Admin:
    """
    Create an administrator.

    With no admins yet the request bootstraps the first superadmin. Once
    admins exist the caller must be an authenticated superadmin.

    Raises:
        UnauthorizedError: admins exist but there is no caller identity
        ConflictError: email already in use
    """
    if current_admin is None:
        if await count_admins(session) == 0:
            return await _bootstrap_first_admin(session, data)
        # Another request bootstrapped after the auth gate ran
        raise UnauthorizedError("Missing authorization header", code=ErrorCode.INVALID_JWT)

    if await get_admin_by_email(session, data.email) is not None:
        raise ConflictError("Admin with this email already exists")

    admin = Admin(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        hashed_password=hash_password(data.password),
        role=data.role,
        status=RecordStatus.ACTIVE,
        created_by_admin_id=current_admin.id,
    )
    session.add(admin)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Admin with this email already exists")

    await session.refresh(admin)
    return admin


async def list_admins(
    session: AsyncSession,
    pagination: PaginationParams,
    status: AdminStatusFilter = AdminStatusFilter.ACTIVE,
) -> Dict[str, Any]:
    """List admins, newest first, filtered by status."""
    query = select(Admin)
    if status != AdminStatusFilter.ALL:
        query = query.where(Admin.status == RecordStatus(status.value))

    count_query = select(func.count()).select_from(query.subquery())
    total = (await session.execute(count_query)).scalar() or 0

    query = query.order_by(Admin.created_at.desc(), Admin.id.desc())
    query = query.limit(pagination.limit).offset(pagination.offset)
    result = await session.execute(query)

    return {"data": list(result.scalars().all()), "total": total}


async def update_admin(session: AsyncSession, admin_id: int, data: AdminUpdate) -> Admin:
    """
    Apply a partial update to an administrator.

    Raises:
        NotFoundError: no such admin
        BadRequestError: the admin is soft-deleted
        ConflictError: the new email belongs to another admin
    """
    admin = await get_admin(session, admin_id)
    if admin.is_deleted:
        raise BadRequestError("Cannot update a deleted admin")

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return admin

    new_email = changes.get("email")
    if new_email and new_email != admin.email:
        existing = await get_admin_by_email(session, new_email)
        if existing is not None and existing.id != admin.id:
            raise ConflictError("Admin with this email already exists")

    for field, value in changes.items():
        setattr(admin, field, value)

    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Admin with this email already exists")

    await session.refresh(admin)
    return admin


async def toggle_admin_status(session: AsyncSession, admin_id: int) -> Admin:
    """Flip an admin between active and deleted."""
    admin = await get_admin(session, admin_id)
    admin.status = RecordStatus.ACTIVE if admin.is_deleted else RecordStatus.DELETED
    await session.commit()
    await session.refresh(admin)
    return admin


async def authenticate_admin(session: AsyncSession, email: str, password: str) -> Dict[str, Any]:
    """
    Verify credentials and issue an access token.

    Unknown email, wrong password and deleted accounts all fail with the
    same message.

    Returns:
        Dict with ``token`` and the ``account`` it was issued for
    """
    admin = await get_admin_by_email(session, email)
    if admin is None or admin.is_deleted or not verify_password(password, admin.hashed_password):
        log_audit_event(
            action=AuditAction.LOGIN,
            resource_type=ResourceType.ADMIN,
            details={"status": "failed", "email": email},
            contains_pii=True,
        )
        raise BadRequestError(LOGIN_FAILED_MESSAGE)

    if not settings.jwt_secret_key:
        logger.error("JWT_SECRET_KEY is not configured")
        raise InternalServerError("Internal server error")

    token = create_access_token(
        admin_id=admin.id,
        first_name=admin.first_name,
        last_name=admin.last_name,
        email=admin.email,
        role=admin.role.value,
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_delta=timedelta(hours=settings.jwt_expire_hours),
    )

    log_audit_event(
        action=AuditAction.LOGIN,
        resource_type=ResourceType.ADMIN,
        resource_id=admin.id,
        admin_id=admin.id,
        details={"status": "success"},
    )
    return {"token": token, "account": admin}
