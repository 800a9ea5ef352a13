"""Application intake and read service functions."""

from typing import Any, Dict, Optional
import logging

from pydantic import ValidationError
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from api.schemas.applications import ApplicationCreate, ApplicationDetail
from api.schemas.common import PaginationParams
from api.services.media import (
    build_storage_path,
    encode_base64,
    normalize_full_name,
    validate_resume,
)
from api.services.positions import get_active_position
from core.errors import (
    InternalServerError,
    NotFoundError,
    ValidationFailedError,
    format_validation_errors,
)
from core.storage.s3 import S3Storage
from database.models.applications import Application
from database.models.candidates import Candidate

logger = logging.getLogger(__name__)

UPLOAD_FAILED_MESSAGE = "Failed to upload resume"


def parse_application(payload: Any) -> ApplicationCreate:
    """
    Validate an application payload.

    Raises:
        ValidationFailedError: with per-field messages
    """
    try:
        return ApplicationCreate.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailedError(format_validation_errors(e.errors()))


async def _find_candidate(session: AsyncSession, email: str) -> Optional[Candidate]:
    result = await session.execute(select(Candidate).where(Candidate.email == email))
    return result.scalar_one_or_none()


async def resolve_candidate(session: AsyncSession, full_name: str, email: str) -> Candidate:
    """
    Find the candidate for an email, or create one.

    An existing candidate gains ``full_name`` as an alias when it is new.
    Runs inside the caller's transaction; nothing is committed here.
    """
    candidate = await _find_candidate(session, email)
    if candidate is not None:
        if candidate.add_alias(full_name):
            logger.info(f"Added alias to candidate {candidate.id}")
        return candidate

    candidate = Candidate(full_name=full_name, email=email)
    try:
        async with session.begin_nested():
            session.add(candidate)
    except IntegrityError:
        # A concurrent submission inserted this email first; use its row
        logger.info("Candidate email inserted concurrently, reusing existing row")
        candidate = await _find_candidate(session, email)
        if candidate is None:
            raise
        candidate.add_alias(full_name)

    return candidate


async def _discard_upload(storage: S3Storage, file_path: str) -> None:
    try:
        await storage.delete(file_path)
        logger.info(f"Removed orphaned résumé {file_path}")
    except Exception as e:
        logger.error(f"Failed to remove orphaned résumé {file_path}: {str(e)}")


async def submit_application(
    session: AsyncSession,
    storage: S3Storage,
    position_id: int,
    payload: Any,
) -> Application:
    """
    Accept a public application for a position.

    The position is checked before the payload, so a missing or deleted
    position is always reported as not found. The résumé is uploaded first;
    if recording the candidate and application then fails, the uploaded
    object is deleted again.

    Raises:
        NotFoundError: position missing or deleted
        ValidationFailedError: invalid payload
        BadRequestError: undecodable, oversized or non-PDF résumé
        InternalServerError: storage or database failure
    """
    await get_active_position(session, position_id)

    data = parse_application(payload)
    resume = validate_resume(data.file_b64)
    full_name = normalize_full_name(data.full_name)
    file_path = build_storage_path(data.file_name)

    try:
        await storage.upload(resume.content, file_path, content_type=resume.mime_type)
    except Exception as e:
        logger.error(f"Résumé upload failed for position {position_id}: {str(e)}", exc_info=True)
        raise InternalServerError(UPLOAD_FAILED_MESSAGE) from e

    try:
        candidate = await resolve_candidate(session, full_name, data.email)
        application = Application(
            candidate_id=candidate.id,
            position_id=position_id,
            resume_file_name=data.file_name,
            resume_file_path=file_path,
        )
        session.add(application)
        await session.commit()
    except Exception as e:
        await session.rollback()
        logger.error(f"Recording application for position {position_id} failed: {str(e)}", exc_info=True)
        await _discard_upload(storage, file_path)
        raise InternalServerError(UPLOAD_FAILED_MESSAGE) from e

    await session.refresh(application)
    logger.info(f"Application {application.id} created for position {position_id}")
    return application


async def fetch_resume_b64(storage: S3Storage, file_path: Optional[str]) -> Optional[str]:
    """Download a résumé as base64. Storage failures yield None."""
    if not file_path:
        return None
    try:
        return encode_base64(await storage.download(file_path))
    except Exception as e:
        logger.warning(f"Could not fetch résumé {file_path}: {str(e)}")
        return None


async def list_applications(session: AsyncSession, pagination: PaginationParams) -> Dict[str, Any]:
    """List applications, newest first, with candidate and position summaries."""
    total = (await session.execute(select(func.count()).select_from(Application))).scalar() or 0

    result = await session.execute(
        select(Application)
        .options(
            selectinload(Application.candidate),
            selectinload(Application.position),
        )
        .order_by(Application.created_at.desc(), Application.id.desc())
        .limit(pagination.limit)
        .offset(pagination.offset)
    )
    return {"data": list(result.scalars().all()), "total": total}


async def get_application(
    session: AsyncSession,
    storage: S3Storage,
    application_id: int,
) -> ApplicationDetail:
    """Get an application with its candidate, position and résumé content."""
    result = await session.execute(
        select(Application)
        .options(
            selectinload(Application.candidate),
            selectinload(Application.position),
        )
        .where(Application.id == application_id)
    )
    application = result.scalar_one_or_none()
    if application is None:
        raise NotFoundError("Application not found")

    detail = ApplicationDetail.model_validate(application)
    detail.resume_file_b64 = await fetch_resume_b64(storage, application.resume_file_path)
    return detail
