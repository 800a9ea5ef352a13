"""Application (intake) schemas."""

from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field, field_validator

from api.schemas.common import CamelModel
from database.models.admins import RecordStatus
from database.models.positions import WorkType


class ApplicationCreate(CamelModel):
    """Public application payload. The résumé travels as base64 text."""

    full_name: str = Field(min_length=1, max_length=180)
    email: EmailStr = Field(max_length=100)
    file_b64: str = Field(alias="fileB64", min_length=1)
    file_name: str = Field(min_length=1, max_length=255)

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_full_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("full_name")
    @classmethod
    def reject_alias_separator(cls, v: str) -> str:
        # Names are stored comma-joined in Candidate.aliases
        if "," in v:
            raise ValueError("Full name must not contain commas")
        return v


class ApplicationCreated(CamelModel):
    id: int
    candidate_id: int
    position_id: int
    resume_file_name: Optional[str] = None
    resume_file_path: Optional[str] = None
    created_at: datetime


class CandidateSummary(CamelModel):
    id: int
    full_name: str
    email: str


class CandidateBrief(CandidateSummary):
    aliases: Optional[str] = None


class PositionSummary(CamelModel):
    id: int
    title: str
    category: str
    work_type: WorkType
    location: Optional[str] = None


class PositionBrief(PositionSummary):
    description: str
    status: RecordStatus


class ApplicationListItem(CamelModel):
    id: int
    created_at: datetime
    resume_file_name: Optional[str] = None
    candidate: CandidateSummary
    position: PositionSummary


class ApplicationDetail(CamelModel):
    id: int
    created_at: datetime
    resume_file_name: Optional[str] = None
    resume_file_path: Optional[str] = None
    resume_file_b64: Optional[str] = Field(None, alias="resumeFileB64")
    candidate: CandidateBrief
    position: PositionBrief
