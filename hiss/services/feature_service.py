"""
HISS Backend — Feature Service (Save Workflow)
===============================================

What:  Orchestrates decode → validate → persist for feature submissions.
Why:   Keeps the routes thin and makes the workflow testable without HTTP.
How:   Decodes the raw JSON body into the variant selected by the kind,
       checks vocabularies, and hands valid records to FeatureRepository.
Who:   Called by the POST / PUT / DELETE handlers in routes/features.py.

Workflow (POST /features/{kind}):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │  Kind    │───▶│  Decode body │───▶│  Vocabulary  │───▶│  Insert  │
    │  (Route) │    │  (Pydantic)  │    │  check       │    │  (Repo)  │
    └──────────┘    └──────────────┘    └──────────────┘    └──────────┘
                          │ 422                 │ 200, error=true
                          ▼                     ▼
                    malformed body        field → message map

Design Decision:
    FeatureService is stateless; the session arrives with each call, so a
    single module-level instance is shared by all requests.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError
from fastapi.exceptions import RequestValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from hiss.database import store_errors
from hiss.exceptions import BadRequestError
from hiss.repositories.feature_repository import FeatureRepository
from hiss.schemas.common import SaveResult
from hiss.schemas.feature import FeatureKind, FeatureRecord

logger = logging.getLogger(__name__)


class FeatureService:
    """
    Create, update and delete feature records of any kind.

    Error Handling Strategy:
        - Malformed body (missing field, wrong type) → RequestValidationError,
          rendered by FastAPI as 422 like any other body error
        - Vocabulary rejection → SaveResult(error=True), HTTP 200
        - Missing id on update → BadRequestError (400)
        - Unknown id on update/delete → NotFoundError (404), from the repository
        - Store failures → StoreError / StoreUnavailableError, from the repository
          or from the commit, which happens before the result is returned
    """

    async def _commit(self, db: AsyncSession, operation: str) -> None:
        """
        Make the write durable before the SaveResult is returned.

        get_db_session also commits, but only after the response has been
        sent; a failure there could no longer reach the client.
        """
        with store_errors(operation):
            await db.commit()

    def decode(self, kind: FeatureKind, payload: Dict[str, Any]) -> FeatureRecord:
        """Decode a JSON body into the record type for `kind`."""
        try:
            return kind.record_type.model_validate(payload)
        except PydanticValidationError as e:
            # Same error shape FastAPI produces for a typed body parameter
            raise RequestValidationError(
                [{**error, "loc": ("body", *error["loc"])} for error in e.errors(include_url=False)]
            ) from e

    async def create(
        self,
        db: AsyncSession,
        kind: FeatureKind,
        payload: Dict[str, Any],
    ) -> SaveResult:
        """
        Validate and insert a new feature.

        Returns:
            SaveResult with the new id, or with the field messages when any
            categorical value is outside its vocabulary (nothing is written).
        """
        record = self.decode(kind, payload)
        validation = record.validate_values()
        if not validation.is_valid:
            logger.info(
                "Rejected %s feature for report %d: %s",
                kind.value, record.report_uid, sorted(validation.messages),
            )
            return SaveResult(error=True, data=validation.messages)

        new_id = await FeatureRepository(db, kind).insert(record)
        await self._commit(db, f"create {kind.value} feature")
        logger.info("Created %s feature %d for report %d", kind.value, new_id, record.report_uid)
        return SaveResult(error=False, id=new_id)

    async def update(
        self,
        db: AsyncSession,
        kind: FeatureKind,
        payload: Dict[str, Any],
    ) -> SaveResult:
        """
        Validate and update an existing feature identified by payload["id"].

        Raises:
            BadRequestError: the payload carries no id
            NotFoundError:   no feature of this kind has that id
        """
        record = self.decode(kind, payload)
        if record.id is None:
            raise BadRequestError(
                message=f"Updating a {kind.value} feature requires its 'id'",
                context={"kind": kind.value},
            )

        validation = record.validate_values()
        if not validation.is_valid:
            logger.info(
                "Rejected update of %s feature %d: %s",
                kind.value, record.id, sorted(validation.messages),
            )
            return SaveResult(error=True, data=validation.messages)

        updated_id = await FeatureRepository(db, kind).update(record)
        await self._commit(db, f"update {kind.value} feature")
        logger.info("Updated %s feature %d", kind.value, updated_id)
        return SaveResult(error=False, id=updated_id)

    async def delete(self, db: AsyncSession, kind: FeatureKind, feature_id: int) -> SaveResult:
        deleted_id = await FeatureRepository(db, kind).delete(feature_id)
        await self._commit(db, f"delete {kind.value} feature")
        logger.info("Deleted %s feature %d", kind.value, deleted_id)
        return SaveResult(error=False, id=deleted_id)


# ── Singleton Instance ────────────────────────────────────────────────────
feature_service = FeatureService()
