"""
HISS Backend — Report Repository
=================================

What:  Read-only access to radiology reports, plus the "every feature of a
       report" aggregation.
Who:   Called by the /radiology and /features/for routes.

Query plans:
    list:   SELECT ... [WHERE pid = :pid] ORDER BY id LIMIT :limit OFFSET :offset
    count:  SELECT count(id) ... [WHERE pid = :pid]
    features_for: three SELECTs, one per feature table, in the same
            transaction (one snapshot under REPEATABLE READ)
"""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hiss.database import store_errors
from hiss.models.radiology import Radiology
from hiss.repositories.feature_repository import FeatureRepository
from hiss.schemas.feature import FeatureKind, ReportFeatures
from hiss.schemas.radiology import RadiologyReport


class ReportRepository:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list(
        self,
        pid: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[RadiologyReport]:
        """
        A page of reports in insertion order, optionally for one patient.

        limit and offset are handed to the database as given; the store
        decides what a zero or negative value means.
        """
        query = select(Radiology)
        if pid is not None:
            query = query.where(Radiology.pid == pid)
        query = query.order_by(Radiology.id).limit(limit).offset(offset)

        with store_errors("list reports"):
            result = await self.session.execute(query)
            rows = result.scalars().all()
        return [RadiologyReport.model_validate(row) for row in rows]

    async def count(self, pid: Optional[int] = None) -> int:
        """Total reports (for one patient when pid is given)."""
        query = select(func.count(Radiology.id))
        if pid is not None:
            query = query.where(Radiology.pid == pid)

        with store_errors("count reports"):
            result = await self.session.execute(query)
            total = result.scalar()
        return total or 0

    async def features_for(self, report_uid: int) -> ReportFeatures:
        """
        Stroke, angio and degenerative features of one report.

        No partial results: if any of the three lookups fails the whole call
        raises.
        """
        found = {}
        for kind in FeatureKind:
            found[kind] = await FeatureRepository(self.session, kind).find_by_report(report_uid)

        return ReportFeatures(
            stroke_features=found[FeatureKind.STROKE],
            angio_features=found[FeatureKind.ANGIO],
            degenerative_features=found[FeatureKind.DEGENERATIVE],
        )
