"""Position schemas."""

from datetime import datetime
from typing import Optional
from pydantic import Field

from api.schemas.common import CamelModel
from database.models.positions import WorkType


class PositionCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=255)
    work_type: WorkType = WorkType.ONSITE
    location: Optional[str] = Field(None, max_length=255)
    description: str = Field(min_length=1)


class PositionUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, min_length=1, max_length=255)
    work_type: Optional[WorkType] = None
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, min_length=1)


class PositionListItem(CamelModel):
    id: int
    title: str
    category: str
    work_type: WorkType
    location: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PositionDetail(PositionListItem):
    description: str
