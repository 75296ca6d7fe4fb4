"""
HISS Backend — Feature Service Unit Tests
==========================================

What:  The save workflow (decode → validate → persist) without HTTP.
How:   Validation-only paths use a mock session; persistence paths use the
       in-memory store.

What we test:
    ✅ Valid submission is inserted, committed and its id returned
    ✅ A failed commit raises StoreError instead of reporting success
    ✅ Rejected submission returns every message and writes nothing
    ✅ Malformed body raises RequestValidationError
    ✅ Update without id is a BadRequestError
    ✅ Update / delete of missing ids propagate NotFoundError
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.exceptions import RequestValidationError
from sqlalchemy import exc as sa_exc

from hiss.exceptions import BadRequestError, NotFoundError, StoreError
from hiss.repositories.feature_repository import FeatureRepository
from hiss.schemas.feature import FeatureKind, StrokeFeature
from hiss.services.feature_service import FeatureService


class TestFeatureServiceCreate:

    def setup_method(self):
        self.service = FeatureService()

    @pytest.mark.asyncio
    async def test_create_success(self, db_session, stroke_payload):
        result = await self.service.create(db_session, FeatureKind.STROKE, stroke_payload)

        assert result.error is False
        assert result.data is None
        [stored] = await FeatureRepository(db_session, FeatureKind.STROKE).find_by_report(1)
        assert stored.id == result.id

    @pytest.mark.asyncio
    async def test_create_commits_before_returning(self, mock_db_session, stroke_payload):
        with patch("hiss.services.feature_service.FeatureRepository") as mock_repo:
            mock_repo.return_value.insert = AsyncMock(return_value=7)

            result = await self.service.create(mock_db_session, FeatureKind.STROKE, stroke_payload)

        assert result.id == 7
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_commit_failure_raises_store_error(self, mock_db_session, stroke_payload):
        mock_db_session.commit.side_effect = sa_exc.OperationalError(
            "COMMIT", {}, Exception("server closed the connection")
        )

        with patch("hiss.services.feature_service.FeatureRepository") as mock_repo:
            mock_repo.return_value.insert = AsyncMock(return_value=7)

            with pytest.raises(StoreError) as exc_info:
                await self.service.create(mock_db_session, FeatureKind.STROKE, stroke_payload)

        assert exc_info.value.context["operation"] == "create stroke feature"

    @pytest.mark.asyncio
    async def test_create_rejected_writes_nothing(self, mock_db_session, angio_payload):
        angio_payload.update(vessel="aorta", finding="clot")

        result = await self.service.create(mock_db_session, FeatureKind.ANGIO, angio_payload)

        assert result.error is True
        assert result.id is None
        assert set(result.data) == {"vessel", "finding"}
        mock_db_session.add.assert_not_called()
        mock_db_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_missing_field(self, mock_db_session, stroke_payload):
        del stroke_payload["extent"]

        with pytest.raises(RequestValidationError) as exc_info:
            await self.service.create(mock_db_session, FeatureKind.STROKE, stroke_payload)

        [error] = exc_info.value.errors()
        assert error["loc"] == ("body", "extent")
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_body_decoded_as_kind_from_path(self, mock_db_session, stroke_payload):
        # A stroke body posted to the angio path lacks vessel/finding
        with pytest.raises(RequestValidationError):
            await self.service.create(mock_db_session, FeatureKind.ANGIO, stroke_payload)


class TestFeatureServiceUpdate:

    def setup_method(self):
        self.service = FeatureService()

    @pytest.mark.asyncio
    async def test_update_success(self, db_session, stroke_payload):
        created = await self.service.create(db_session, FeatureKind.STROKE, stroke_payload)

        result = await self.service.update(
            db_session,
            FeatureKind.STROKE,
            {**stroke_payload, "id": created.id, "temporal": "chronic"},
        )

        assert result.error is False
        assert result.id == created.id
        [stored] = await FeatureRepository(db_session, FeatureKind.STROKE).find_by_report(1)
        assert stored.temporal == "chronic"

    @pytest.mark.asyncio
    async def test_update_without_id(self, mock_db_session, stroke_payload):
        with pytest.raises(BadRequestError, match="requires its 'id'"):
            await self.service.update(mock_db_session, FeatureKind.STROKE, stroke_payload)

        mock_db_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_rejected_keeps_row(self, db_session, stroke_payload):
        created = await self.service.create(db_session, FeatureKind.STROKE, stroke_payload)

        result = await self.service.update(
            db_session,
            FeatureKind.STROKE,
            {**stroke_payload, "id": created.id, "side": "center"},
        )

        assert result.error is True
        assert result.data == {"side": "center is not a valid 'side' value"}
        [stored] = await FeatureRepository(db_session, FeatureKind.STROKE).find_by_report(1)
        assert stored == StrokeFeature(id=created.id, **stroke_payload)

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, db_session, degenerative_payload):
        with pytest.raises(NotFoundError):
            await self.service.update(
                db_session, FeatureKind.DEGENERATIVE, {**degenerative_payload, "id": 31337}
            )


class TestFeatureServiceDelete:

    def setup_method(self):
        self.service = FeatureService()

    @pytest.mark.asyncio
    async def test_delete_success(self, db_session, angio_payload):
        created = await self.service.create(db_session, FeatureKind.ANGIO, angio_payload)

        result = await self.service.delete(db_session, FeatureKind.ANGIO, created.id)

        assert result.error is False
        assert result.id == created.id
        assert await FeatureRepository(db_session, FeatureKind.ANGIO).find_by_report(1) == []

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.delete(db_session, FeatureKind.ANGIO, 8)
