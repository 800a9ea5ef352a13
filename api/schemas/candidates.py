"""Candidate schemas."""

from datetime import datetime
from typing import Optional
from pydantic import Field

from api.schemas.applications import PositionSummary
from api.schemas.common import CamelModel


class CandidateListItem(CamelModel):
    id: int
    full_name: str
    email: str
    aliases: Optional[str] = None
    application_count: int = 0


class CandidateApplication(CamelModel):
    """One application as seen from the candidate's history."""

    id: int
    created_at: datetime
    resume_file_name: Optional[str] = None
    resume_file_path: Optional[str] = None
    resume_file_b64: Optional[str] = Field(None, alias="resumeFileB64")
    position: PositionSummary


class CandidateDetail(CamelModel):
    id: int
    full_name: str
    email: str
    aliases: Optional[str] = None
    applications: list[CandidateApplication] = Field(default_factory=list)
