"""
HISS Backend — Feature Record Validation Tests
===============================================

What we test:
    ✅ Values inside the vocabularies validate with no messages
    ✅ A value outside its vocabulary is reported under that exact field,
       for every categorical field of every variant
    ✅ Several bad fields are all reported
    ✅ cortical_atrophy_description is checked
    ✅ FeatureKind accepts exactly stroke / angio / degenerative
    ✅ Identifier fields stay within the BIGINT range
"""

import pytest
from pydantic import ValidationError

from hiss.exceptions import BadRequestError
from hiss.schemas.feature import (
    AngioFeature,
    DegenerativeFeature,
    FeatureKind,
    StrokeFeature,
)

VARIANTS = [
    (StrokeFeature, "stroke_payload"),
    (AngioFeature, "angio_payload"),
    (DegenerativeFeature, "degenerative_payload"),
]

CATEGORICAL_FIELDS = [
    (StrokeFeature, "stroke_payload", field) for field in StrokeFeature.vocabulary_fields
] + [
    (AngioFeature, "angio_payload", field) for field in AngioFeature.vocabulary_fields
] + [
    (DegenerativeFeature, "degenerative_payload", field)
    for field in DegenerativeFeature.vocabulary_fields
]


class TestValidateValues:

    @pytest.mark.parametrize("record_type,payload_fixture", VARIANTS)
    def test_valid_record(self, record_type, payload_fixture, request):
        record = record_type(**request.getfixturevalue(payload_fixture))

        validation = record.validate_values()

        assert validation.is_valid is True
        assert validation.messages == {}

    @pytest.mark.parametrize("record_type,payload_fixture,field", CATEGORICAL_FIELDS)
    def test_invalid_field_reported_under_its_own_name(
        self, record_type, payload_fixture, field, request
    ):
        payload = request.getfixturevalue(payload_fixture)
        payload[field] = "not-a-term"
        record = record_type(**payload)

        validation = record.validate_values()

        assert validation.is_valid is False
        assert list(validation.messages) == [field]
        assert "not-a-term" in validation.messages[field]

    def test_angio_side_keyed_as_side(self, angio_payload):
        angio_payload["side"] = "upper"

        validation = AngioFeature(**angio_payload).validate_values()

        assert validation.messages == {"side": "upper is not a valid 'side' value"}

    def test_all_failures_reported(self, stroke_payload):
        stroke_payload.update(kind="tumor", side="Left", extent="huge")

        validation = StrokeFeature(**stroke_payload).validate_values()

        assert validation.is_valid is False
        assert set(validation.messages) == {"kind", "side", "extent"}

    def test_sentinels_are_valid(self, degenerative_payload):
        degenerative_payload.update(
            cortical_atrophy="NA",
            cortical_atrophy_description="unspecified",
            central_atrophy="unspecified",
            microangiopathy="NA",
        )

        assert DegenerativeFeature(**degenerative_payload).validate_values().is_valid

    def test_cortical_atrophy_description_checked(self, degenerative_payload):
        degenerative_payload["cortical_atrophy_description"] = "asymmetric"

        validation = DegenerativeFeature(**degenerative_payload).validate_values()

        assert set(validation.messages) == {"cortical_atrophy_description"}


class TestRecordValues:

    def test_insert_values_exclude_id(self, stroke_payload):
        record = StrokeFeature(id=99, **stroke_payload)

        values = record.insert_values()

        assert "id" not in values
        assert values == stroke_payload

    def test_categorical_values_exclude_correlation_fields(self, angio_payload):
        record = AngioFeature(**angio_payload)

        assert record.categorical_values() == {
            "vessel": "M1",
            "side": "left",
            "finding": "occlusion",
        }


class TestFeatureKind:

    @pytest.mark.parametrize("segment,record_type", [
        ("stroke", StrokeFeature),
        ("angio", AngioFeature),
        ("degenerative", DegenerativeFeature),
    ])
    def test_known_kinds(self, segment, record_type):
        kind = FeatureKind.parse(segment)
        assert kind.value == segment
        assert kind.record_type is record_type

    @pytest.mark.parametrize("segment", ["tumor", "Stroke", "features", ""])
    def test_unknown_kind_rejected(self, segment):
        with pytest.raises(BadRequestError, match="not a valid 'feature' path segment"):
            FeatureKind.parse(segment)


class TestIdentifierBounds:

    @pytest.mark.parametrize("field,value", [
        ("report_uid", 2**63),
        ("eid", -(2**63) - 1),
        ("pid", 99999999999999999999999),
        ("id", 2**63),
    ])
    def test_outside_bigint_rejected(self, stroke_payload, field, value):
        stroke_payload[field] = value

        with pytest.raises(ValidationError) as exc_info:
            StrokeFeature(**stroke_payload)

        assert exc_info.value.errors()[0]["loc"] == (field,)

    def test_bigint_edges_accepted(self, stroke_payload):
        stroke_payload.update(report_uid=2**63 - 1, eid=-(2**63), id=2**63 - 1)

        assert StrokeFeature(**stroke_payload).report_uid == 2**63 - 1
