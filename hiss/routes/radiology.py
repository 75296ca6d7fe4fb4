"""
HISS Backend — Radiology Report Routes
=======================================

What:  Report counts and limit/offset pages of reports, optionally for a
       single patient.
Who:   The report browser of the annotation front-end. It asks for the row
       count first to size its pager, then fetches pages.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from hiss.database import get_db_session
from hiss.repositories.report_repository import ReportRepository
from hiss.schemas.common import BIGINT_MAX, BIGINT_MIN, ErrorResponse
from hiss.schemas.radiology import RadiologyReport

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/radiology",
    tags=["Radiology"],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
)


@router.get("/rows", response_model=int, summary="Count all reports")
async def count_reports(db: AsyncSession = Depends(get_db_session)) -> int:
    return await ReportRepository(db).count()


@router.get("/rows/for/{pid}", response_model=int, summary="Count a patient's reports")
async def count_patient_reports(
    pid: int = Path(..., ge=BIGINT_MIN, le=BIGINT_MAX, description="Patient identifier"),
    db: AsyncSession = Depends(get_db_session),
) -> int:
    return await ReportRepository(db).count(pid=pid)


@router.get(
    "/records/{limit}/{offset}",
    response_model=List[RadiologyReport],
    summary="Page through all reports",
)
async def list_reports(
    limit: int = Path(..., ge=BIGINT_MIN, le=BIGINT_MAX, description="Page size"),
    offset: int = Path(..., ge=BIGINT_MIN, le=BIGINT_MAX, description="Rows to skip"),
    db: AsyncSession = Depends(get_db_session),
) -> List[RadiologyReport]:
    """
    Reports in insertion order. limit/offset are passed to the database
    unchanged, within the BIGINT range (422 outside it).
    """
    reports = await ReportRepository(db).list(limit=limit, offset=offset)
    logger.debug("Listed %d reports (limit=%d, offset=%d)", len(reports), limit, offset)
    return reports


@router.get(
    "/records/for/{pid}/{limit}/{offset}",
    response_model=List[RadiologyReport],
    summary="Page through a patient's reports",
)
async def list_patient_reports(
    pid: int = Path(..., ge=BIGINT_MIN, le=BIGINT_MAX, description="Patient identifier"),
    limit: int = Path(..., ge=BIGINT_MIN, le=BIGINT_MAX, description="Page size"),
    offset: int = Path(..., ge=BIGINT_MIN, le=BIGINT_MAX, description="Rows to skip"),
    db: AsyncSession = Depends(get_db_session),
) -> List[RadiologyReport]:
    reports = await ReportRepository(db).list(pid=pid, limit=limit, offset=offset)
    logger.debug(
        "Listed %d reports of patient %d (limit=%d, offset=%d)",
        len(reports), pid, limit, offset,
    )
    return reports
