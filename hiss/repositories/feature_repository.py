"""
HISS Backend — Feature Repository
==================================

What:  Persistence operations for one feature kind: find by report, insert,
       update and delete.
How:   The session is passed in by the caller (one per request); the kind
       selects both the ORM table and the Pydantic record type.
Who:   FeatureService for writes, ReportRepository and the feature routes
       for reads.

Atomicity:
    Every method issues a single statement in the caller's transaction.
    get_db_session commits it when the request succeeds; concurrent writers
    to the same id are serialized by PostgreSQL at REPEATABLE READ.

Not-found handling:
    update() and delete() inspect the affected row count. Zero rows means the
    id does not exist and is reported as NotFoundError rather than silently
    echoing the id back.
"""

import logging
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hiss.database import store_errors
from hiss.exceptions import NotFoundError
from hiss.models.feature import FEATURE_TABLES
from hiss.schemas.feature import FeatureKind, FeatureRecord

logger = logging.getLogger(__name__)


class FeatureRepository:
    """Table gateway for the feature table of `kind`."""

    def __init__(self, session: AsyncSession, kind: FeatureKind):
        self.session = session
        self.kind = kind
        self.table = FEATURE_TABLES[kind.value]
        self.record_type = kind.record_type

    @property
    def resource(self) -> str:
        return f"{self.kind.value} feature"

    def _check_record(self, record: FeatureRecord) -> None:
        if not isinstance(record, self.record_type):
            raise TypeError(
                f"{type(record).__name__} cannot be stored in {self.table.__tablename__}"
            )

    async def find_by_report(self, report_uid: int) -> List[FeatureRecord]:
        """All features of this kind for a report, oldest first (by id)."""
        query = (
            select(self.table)
            .where(self.table.report_uid == report_uid)
            .order_by(self.table.id)
        )
        with store_errors(f"find {self.resource}s"):
            result = await self.session.execute(query)
            rows = result.scalars().all()
        return [self.record_type.model_validate(row) for row in rows]

    async def insert(self, record: FeatureRecord) -> int:
        """
        Insert a new row and return the store-assigned id.

        The record must already have passed validate_values(); this method
        does not re-check vocabularies. Any id on the record is ignored.
        """
        self._check_record(record)
        row = self.table(**record.insert_values())
        with store_errors(f"insert {self.resource}"):
            self.session.add(row)
            # Flush assigns the primary key without committing
            await self.session.flush()
        logger.debug("Inserted %s %d for report %d", self.resource, row.id, record.report_uid)
        return row.id

    async def update(self, record: FeatureRecord) -> int:
        """
        Replace the categorical fields of row `record.id`.

        Correlation columns (report_uid, eid, pid) are never changed.

        Raises:
            NotFoundError: no row has that id
        """
        self._check_record(record)
        if record.id is None:
            raise ValueError("update() needs a record with an id")
        statement = (
            update(self.table)
            .where(self.table.id == record.id)
            .values(**record.categorical_values())
        )
        with store_errors(f"update {self.resource}"):
            result = await self.session.execute(statement)
        if result.rowcount == 0:
            raise NotFoundError(resource=self.resource, resource_id=record.id)
        return record.id

    async def delete(self, feature_id: int) -> int:
        """
        Delete row `feature_id` and return the id.

        Raises:
            NotFoundError: no row has that id
        """
        statement = delete(self.table).where(self.table.id == feature_id)
        with store_errors(f"delete {self.resource}"):
            result = await self.session.execute(statement)
        if result.rowcount == 0:
            raise NotFoundError(resource=self.resource, resource_id=feature_id)
        logger.debug("Deleted %s %d", self.resource, feature_id)
        return feature_id
