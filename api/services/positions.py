"""Position service functions."""

from typing import Any, Dict, Optional
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.common import PaginationParams
from api.schemas.positions import PositionCreate, PositionUpdate
from core.errors import ErrorCode, NotFoundError, UnauthorizedError
from core.security import AdminIdentity
from database.models.admins import RecordStatus
from database.models.positions import Position

logger = logging.getLogger(__name__)


async def get_active_position(session: AsyncSession, position_id: int) -> Position:
    """
    Get a position that has not been soft-deleted.

    Raises:
        NotFoundError: missing or deleted position
    """
    result = await session.execute(
        select(Position).where(
            Position.id == position_id,
            Position.status == RecordStatus.ACTIVE,
        )
    )
    position = result.scalar_one_or_none()
    if position is None:
        raise NotFoundError("Position not found")
    return position


async def list_positions(
    session: AsyncSession,
    pagination: PaginationParams,
    category: Optional[str] = None,
) -> Dict[str, Any]:
    """List active positions, newest first."""
    query = select(Position).where(Position.status == RecordStatus.ACTIVE)
    if category:
        query = query.where(Position.category == category)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await session.execute(count_query)).scalar() or 0

    query = query.order_by(Position.created_at.desc(), Position.id.desc())
    query = query.limit(pagination.limit).offset(pagination.offset)
    result = await session.execute(query)

    return {"data": list(result.scalars().all()), "total": total}


async def create_position(
    session: AsyncSession,
    data: PositionCreate,
    current_admin: Optional[AdminIdentity],
) -> Position:
    """Create a position owned by the acting admin."""
    if current_admin is None:
        # Positions need an owner, which cannot exist before the first admin
        raise UnauthorizedError("Missing authorization header", code=ErrorCode.INVALID_JWT)

    position = Position(
        title=data.title,
        category=data.category,
        work_type=data.work_type,
        location=data.location,
        description=data.description,
        status=RecordStatus.ACTIVE,
        created_by_admin_id=current_admin.id,
    )
    session.add(position)
    await session.commit()
    await session.refresh(position)

    logger.info(f"Position {position.id} created by admin {current_admin.id}")
    return position


async def update_position(session: AsyncSession, position_id: int, data: PositionUpdate) -> Position:
    """Apply a partial update to an active position."""
    position = await get_active_position(session, position_id)

    changes = data.model_dump(exclude_unset=True)
    # location may be cleared; the required columns may not
    for field, value in changes.items():
        if value is None and field != "location":
            continue
        setattr(position, field, value)

    await session.commit()
    await session.refresh(position)
    return position


async def delete_position(session: AsyncSession, position_id: int) -> Position:
    """Soft-delete an active position."""
    position = await get_active_position(session, position_id)
    position.status = RecordStatus.DELETED
    await session.commit()
    await session.refresh(position)
    return position
