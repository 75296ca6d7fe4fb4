"""
HISS Backend — Feature Route Handlers
======================================

What:  Read, create, update and delete feature records of any kind.
How:   The `{kind}` path segment is resolved with FeatureKind.parse() before
       anything else happens, so an unknown kind ("tumor") is answered with
       400 and never reaches the database.
Who:   The annotation form of the front-end.

Response contract for mutations (POST / PUT / DELETE):
    200 {"error": false, "data": null, "id": 17}           saved
    200 {"error": true,  "data": {field: message}, "id": null}   rejected values
    400 unknown kind, or PUT without id
    404 PUT / DELETE of an id that does not exist
    422 body missing fields or with wrong types
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from hiss.database import get_db_session
from hiss.repositories.feature_repository import FeatureRepository
from hiss.repositories.report_repository import ReportRepository
from hiss.schemas.common import BIGINT_MAX, BIGINT_MIN, ErrorResponse, SaveResult
from hiss.schemas.feature import AnyFeature, FeatureKind, ReportFeatures
from hiss.services.feature_service import feature_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/features", tags=["Features"])

_KIND_ERRORS = {
    400: {"description": "Unknown feature kind", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
_MUTATION_ERRORS = {
    **_KIND_ERRORS,
    404: {"description": "Feature not found", "model": ErrorResponse},
    503: {"description": "Database busy", "model": ErrorResponse},
}


@router.get(
    "/for/{report_uid}",
    response_model=ReportFeatures,
    summary="All features of a report",
    description="Returns StrokeFeatures, AngioFeatures and DegenerativeFeatures for one report.",
)
async def features_for_report(
    report_uid: int = Path(..., ge=BIGINT_MIN, le=BIGINT_MAX, description="Report identifier"),
    db: AsyncSession = Depends(get_db_session),
) -> ReportFeatures:
    features = await ReportRepository(db).features_for(report_uid)
    logger.debug(
        "Report %d has %d stroke, %d angio, %d degenerative features",
        report_uid,
        len(features.stroke_features),
        len(features.angio_features),
        len(features.degenerative_features),
    )
    return features


@router.get(
    "/{kind}/for/{report_uid}",
    response_model=List[AnyFeature],
    responses=_KIND_ERRORS,
    summary="Features of one kind for a report",
)
async def features_of_kind(
    kind: str,
    report_uid: int = Path(..., ge=BIGINT_MIN, le=BIGINT_MAX, description="Report identifier"),
    db: AsyncSession = Depends(get_db_session),
):
    feature_kind = FeatureKind.parse(kind)
    found = await FeatureRepository(db, feature_kind).find_by_report(report_uid)
    logger.debug("Report %d has %d %s features", report_uid, len(found), feature_kind.value)
    return found


@router.post(
    "/{kind}",
    response_model=SaveResult,
    responses=_MUTATION_ERRORS,
    summary="Create a feature",
    description=(
        "Decodes the body as the record type of `kind`, checks every categorical "
        "field against its vocabulary and inserts the record. Rejected values are "
        "returned in `data` with error=true."
    ),
)
async def create_feature(
    kind: str,
    payload: Dict[str, Any] = Body(..., description="Feature record without id"),
    db: AsyncSession = Depends(get_db_session),
) -> SaveResult:
    feature_kind = FeatureKind.parse(kind)
    return await feature_service.create(db, feature_kind, payload)


@router.put(
    "/{kind}",
    response_model=SaveResult,
    responses=_MUTATION_ERRORS,
    summary="Update a feature",
    description="Replaces the categorical fields of the feature identified by the body's `id`.",
)
async def update_feature(
    kind: str,
    payload: Dict[str, Any] = Body(..., description="Feature record including id"),
    db: AsyncSession = Depends(get_db_session),
) -> SaveResult:
    feature_kind = FeatureKind.parse(kind)
    return await feature_service.update(db, feature_kind, payload)


@router.delete(
    "/{kind}/{feature_id}",
    response_model=SaveResult,
    responses=_MUTATION_ERRORS,
    summary="Delete a feature",
)
async def delete_feature(
    kind: str,
    feature_id: int = Path(..., ge=BIGINT_MIN, le=BIGINT_MAX, description="Feature identifier"),
    db: AsyncSession = Depends(get_db_session),
) -> SaveResult:
    feature_kind = FeatureKind.parse(kind)
    return await feature_service.delete(db, feature_kind, feature_id)
