"""Candidate service functions."""

from typing import Any, Dict
import asyncio
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from api.schemas.candidates import CandidateApplication, CandidateDetail
from api.schemas.common import PaginationParams
from api.services.applications import fetch_resume_b64
from core.errors import NotFoundError
from core.storage.s3 import S3Storage
from database.models.applications import Application
from database.models.candidates import Candidate

logger = logging.getLogger(__name__)


async def list_candidates(session: AsyncSession, pagination: PaginationParams) -> Dict[str, Any]:
    """List candidates, newest first, with how many applications each has."""
    total = (await session.execute(select(func.count()).select_from(Candidate))).scalar() or 0

    counts = (
        select(
            Application.candidate_id,
            func.count(Application.id).label("application_count"),
        )
        .group_by(Application.candidate_id)
        .subquery()
    )
    result = await session.execute(
        select(Candidate, func.coalesce(counts.c.application_count, 0))
        .outerjoin(counts, counts.c.candidate_id == Candidate.id)
        .order_by(Candidate.id.desc())
        .limit(pagination.limit)
        .offset(pagination.offset)
    )

    candidates = []
    for candidate, application_count in result.all():
        candidates.append({
            "id": candidate.id,
            "full_name": candidate.full_name,
            "email": candidate.email,
            "aliases": candidate.aliases,
            "application_count": application_count,
        })

    return {"data": candidates, "total": total}


async def get_candidate(
    session: AsyncSession,
    storage: S3Storage,
    candidate_id: int,
) -> CandidateDetail:
    """Get a candidate with every application, newest first, résumés included."""
    candidate = await session.get(Candidate, candidate_id)
    if candidate is None:
        raise NotFoundError("Candidate not found")

    result = await session.execute(
        select(Application)
        .options(selectinload(Application.position))
        .where(Application.candidate_id == candidate_id)
        .order_by(Application.created_at.desc(), Application.id.desc())
    )
    applications = list(result.scalars().all())

    resumes = await asyncio.gather(
        *(fetch_resume_b64(storage, application.resume_file_path) for application in applications)
    )

    history = []
    for application, resume_b64 in zip(applications, resumes):
        item = CandidateApplication.model_validate(application)
        item.resume_file_b64 = resume_b64
        history.append(item)

    return CandidateDetail(
        id=candidate.id,
        full_name=candidate.full_name,
        email=candidate.email,
        aliases=candidate.aliases,
        applications=history,
    )
