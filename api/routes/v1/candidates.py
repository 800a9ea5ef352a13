"""
Candidate endpoints.

Candidates are created only through applications; these endpoints are read-only.
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_pagination_params, get_storage
from api.schemas.candidates import CandidateDetail, CandidateListItem
from api.schemas.common import PaginatedResponse, PaginationParams
from api.services import candidates as candidate_service
from core.storage.s3 import S3Storage
from database.engine import get_db

router = APIRouter(prefix="/candidates", tags=["Candidates"])


@router.get(
    "",
    response_model=PaginatedResponse[CandidateListItem],
    summary="List Candidates",
    description="Candidates, newest first, with their application count.",
)
async def list_candidates(
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_db),
):
    result = await candidate_service.list_candidates(db, pagination)
    return PaginatedResponse[CandidateListItem].create(
        data=[CandidateListItem.model_validate(candidate) for candidate in result["data"]],
        total=result["total"],
        pagination=pagination,
    )


@router.get(
    "/{candidate_id}",
    response_model=CandidateDetail,
    summary="Get Candidate",
    description="Candidate with every application, newest first, résumés as base64.",
)
async def get_candidate(
    candidate_id: int = Path(..., description="Candidate ID"),
    db: AsyncSession = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
):
    return await candidate_service.get_candidate(db, storage, candidate_id)
