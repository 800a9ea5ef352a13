"""
Security utilities.

Provides password hashing, admin access tokens, and audit logging with
PII masking for administrative actions.
"""

import functools
import logging
import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Set, TypedDict
from enum import Enum

import bcrypt
import jwt

logger = logging.getLogger("security.audit")


# ==================== Passwords ==================== #

def hash_password(password: str) -> str:
    """Hash a password with a per-password bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, hashed_password: Optional[str]) -> bool:
    """Check a password against a stored hash. Missing hashes never match."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed hash in the database
        return False


# ==================== Tokens ==================== #

class JWTPayload(TypedDict, total=False):
    """Claims carried by an admin access token."""
    sub: str
    id: int
    firstName: str
    lastName: str
    email: str
    role: str
    iat: int
    exp: int


@dataclass(frozen=True)
class AdminIdentity:
    """Verified administrator identity attached to a request."""
    id: int
    role: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def is_superadmin(self) -> bool:
        return self.role == "superadmin"

    @classmethod
    def from_payload(cls, payload: JWTPayload) -> "AdminIdentity":
        return cls(
            id=int(payload["sub"]),
            role=str(payload.get("role", "standard")),
            email=payload.get("email"),
            first_name=payload.get("firstName"),
            last_name=payload.get("lastName"),
        )


def create_access_token(
    admin_id: int,
    first_name: str,
    last_name: str,
    email: str,
    role: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_delta: timedelta = timedelta(hours=9),
) -> str:
    """
    Issue a signed admin access token.

    The subject claim is the admin id. The password hash is never included.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(admin_id),
        "id": admin_id,
        "firstName": first_name,
        "lastName": last_name,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def verify_jwt_token(token: str, secret_key: str, algorithm: str = "HS256") -> JWTPayload:
    """
    Verify signature and expiry of an access token.

    Raises:
        jwt.ExpiredSignatureError: token expired
        jwt.InvalidTokenError: any other verification failure
    """
    payload = jwt.decode(
        token,
        secret_key,
        algorithms=[algorithm],
        options={"require": ["exp", "sub"]},
    )
    try:
        int(payload["sub"])
    except (TypeError, ValueError):
        raise jwt.InvalidTokenError("Subject claim is not an admin id")
    return payload


# ==================== Audit ==================== #

class AuditAction(str, Enum):
    """Audit log action types."""
    LOGIN = "LOGIN"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    TOGGLE_STATUS = "TOGGLE_STATUS"
    APPLY = "APPLY"


class ResourceType(str, Enum):
    """Resource types for audit logging."""
    ADMIN = "ADMIN"
    POSITION = "POSITION"
    APPLICATION = "APPLICATION"


# PII fields that should be masked in logs
PII_FIELDS: Set[str] = {
    "email", "first_name", "last_name", "full_name", "name",
    "firstname", "lastname", "fullname",
}


def mask_pii(data: Any, depth: int = 0) -> Any:
    """
    Recursively mask PII fields in data structures.

    Args:
        data: Data to mask (dict, list, or primitive)
        depth: Current recursion depth (max 10)

    Returns:
        Data with PII fields masked
    """
    if depth > 10:
        return "[MAX_DEPTH]"

    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            if key.lower() in PII_FIELDS:
                if isinstance(value, str) and len(value) > 0:
                    # Partial masking: show first char and length indicator
                    masked[key] = f"{value[0]}***[{len(value)}]"
                else:
                    masked[key] = "[MASKED]"
            else:
                masked[key] = mask_pii(value, depth + 1)
        return masked
    elif isinstance(data, list):
        return [mask_pii(item, depth + 1) for item in data[:5]]  # Limit list items
    else:
        return data


def log_audit_event(
    action: AuditAction,
    resource_type: ResourceType,
    resource_id: Optional[Any] = None,
    admin_id: Optional[int] = None,
    details: Optional[Dict[str, Any]] = None,
    contains_pii: bool = False,
) -> Dict[str, Any]:
    """
    Log an audit event as a single structured JSON line.

    Returns:
        The event that was logged
    """
    event = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event_type": "AUDIT",
        "action": action.value,
        "resource_type": resource_type.value,
        "resource_id": str(resource_id) if resource_id is not None else None,
        "admin_id": admin_id,
        "contains_pii": contains_pii,
        "details": mask_pii(details) if details and contains_pii else details,
    }

    logger.info(json.dumps(event, default=str))
    return event


def audit_log(
    action: AuditAction,
    resource_type: ResourceType,
    resource_id_param: Optional[str] = None,
):
    """
    Decorator for audit logging API endpoints.

    The endpoint's ``current_admin`` keyword argument (an ``AdminIdentity``
    or None) identifies the actor.

    Usage:
        @router.put("/{admin_id}")
        @audit_log(AuditAction.UPDATE, ResourceType.ADMIN, "admin_id")
        async def update_admin(admin_id: int, current_admin: AdminIdentity = ...):
            ...
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            current_admin = kwargs.get("current_admin")
            admin_id = current_admin.id if current_admin else None
            resource_id = kwargs.get(resource_id_param) if resource_id_param else None

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                log_audit_event(
                    action=action,
                    resource_type=resource_type,
                    resource_id=resource_id,
                    admin_id=admin_id,
                    details={"status": "failed", "error": type(e).__name__},
                )
                raise

            if resource_id is None:
                resource_id = getattr(result, "id", None)
                if resource_id is None and isinstance(result, dict):
                    resource_id = result.get("id")
            log_audit_event(
                action=action,
                resource_type=resource_type,
                resource_id=resource_id,
                admin_id=admin_id,
                details={"status": "success"},
            )
            return result
        return wrapper
    return decorator
