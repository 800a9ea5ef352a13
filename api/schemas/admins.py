"""Administrator and authentication schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import EmailStr, Field, field_validator

from api.schemas.common import CamelModel
from database.models.admins import AdminRole, RecordStatus


class AdminStatusFilter(str, Enum):
    """Status filter for admin listings."""

    ACTIVE = "active"
    DELETED = "deleted"
    ALL = "all"


class AdminCreate(CamelModel):
    """Request to create an administrator."""

    first_name: str = Field(min_length=1, max_length=60, description="First name")
    last_name: str = Field(min_length=1, max_length=60, description="Last name")
    email: EmailStr = Field(max_length=100)
    password: str = Field(min_length=8, max_length=255)
    role: AdminRole = Field(default=AdminRole.STANDARD, description="Ignored for the bootstrap admin")

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class AdminUpdate(CamelModel):
    """Partial update of an administrator."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=60)
    last_name: Optional[str] = Field(None, min_length=1, max_length=60)
    email: Optional[EmailStr] = Field(None, max_length=100)
    role: Optional[AdminRole] = None


class AdminResponse(CamelModel):
    """Administrator as returned to clients. Never carries the password hash."""

    id: int
    first_name: str
    last_name: str
    email: str
    role: AdminRole
    status: RecordStatus
    created_by_admin_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class AdminStatusResponse(CamelModel):
    """Result of toggling an administrator's status."""

    id: int
    status: RecordStatus


class LoginRequest(CamelModel):
    """Email/password login."""

    email: EmailStr
    password: str = Field(min_length=8)


class LoginResponse(CamelModel):
    """Signed token plus the account it identifies."""

    token: str
    account: AdminResponse
