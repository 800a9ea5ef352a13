"""FastAPI dependencies for dependency injection."""

from typing import Optional
from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.common import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, PaginationParams
from api.services.admins import count_admins
from core.config import settings
from core.errors import ForbiddenError
from core.middleware.authentication import evaluate_auth, rejection_error
from core.security import AdminIdentity
from core.storage.s3 import S3Storage
from database.engine import get_db


_storage: Optional[S3Storage] = None


def get_storage() -> S3Storage:
    """Return the process-wide résumé storage client."""
    global _storage
    if _storage is None:
        _storage = S3Storage()
    return _storage


async def require_admin(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[AdminIdentity]:
    """
    Evaluate the admin auth gate.

    While no admin exists the request passes with no identity. Otherwise a
    valid bearer token is needed and its identity is attached to
    ``request.state.admin``.
    """
    result = evaluate_auth(
        request.headers.get("authorization"),
        await count_admins(db),
        settings.jwt_secret_key,
        settings.jwt_algorithm,
    )
    if not result.allowed:
        raise rejection_error(result)

    request.state.admin = result.identity
    request.state.auth_decision = result.decision
    return result.identity


async def require_superadmin(
    current_admin: Optional[AdminIdentity] = Depends(require_admin),
) -> Optional[AdminIdentity]:
    """
    Require a superadmin identity.

    During bootstrap (no admins at all) there is no identity to check and
    the request passes.
    """
    if current_admin is None:
        return None

    if not current_admin.is_superadmin:
        raise ForbiddenError("forbidden")

    return current_admin


def _parse_positive_int(value: Optional[str], default: int) -> int:
    try:
        parsed = int(value) if value is not None else default
    except ValueError:
        return default
    return parsed if parsed >= 1 else default


async def get_pagination_params(
    page: Optional[str] = Query(None, description="Page number (1-indexed)"),
    limit: Optional[str] = Query(None, description="Items per page (max 100)"),
) -> PaginationParams:
    """
    Parse pagination query params leniently.

    Non-numeric or non-positive values fall back to the defaults; ``limit``
    is capped at 100.
    """
    return PaginationParams(
        page=_parse_positive_int(page, DEFAULT_PAGE),
        limit=min(_parse_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT),
    )
