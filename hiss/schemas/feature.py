"""
HISS Backend — Feature Record Schemas
======================================

What:  Pydantic value types for the three feature kinds and the closed
       `FeatureKind` tag that selects between them.
Why:   The `{kind}` path segment decides how a request body is decoded; the
       decoded record then checks its categorical fields against the
       controlled vocabularies before anything is written.
How:   Each variant declares `vocabulary_fields` (field name → vocabulary
       name). `validate_values()` walks that mapping and reports every failing
       field, keyed by the field's own name.

Wire format:
    JSON field names equal the record attributes (snake_case). `id` is
    omitted (or null) on create and required on update.
"""

from enum import Enum
from typing import ClassVar, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

from hiss import vocabulary
from hiss.exceptions import BadRequestError
from hiss.schemas.common import BIGINT_MAX, BIGINT_MIN


class FeatureKind(str, Enum):
    """The closed set of feature variants, as spelled in URL paths."""

    STROKE = "stroke"
    ANGIO = "angio"
    DEGENERATIVE = "degenerative"

    @classmethod
    def parse(cls, value: str) -> "FeatureKind":
        """
        Resolve a `{kind}` path segment.

        Raises:
            BadRequestError: for any segment outside the three variants
        """
        try:
            return cls(value)
        except ValueError:
            raise BadRequestError(
                message=f"`{value}` is not a valid 'feature' path segment",
                context={"kind": value, "allowed": [k.value for k in cls]},
            ) from None

    @property
    def record_type(self) -> Type["FeatureRecord"]:
        return FEATURE_RECORDS[self]


class Validation(BaseModel):
    """Outcome of a vocabulary check. An empty `messages` means valid."""

    is_valid: bool
    messages: Dict[str, str] = Field(default_factory=dict)


class FeatureRecord(BaseModel):
    """
    Fields and behavior shared by every feature variant.

    Attributes:
        report_uid: Correlates the feature with exactly one radiology report
        eid:        Encounter identifier copied from the report
        pid:        Patient identifier copied from the report
        id:         Store-assigned identifier; None until inserted
    """

    vocabulary_fields: ClassVar[Dict[str, str]] = {}

    report_uid: int = Field(ge=BIGINT_MIN, le=BIGINT_MAX)
    eid: int = Field(ge=BIGINT_MIN, le=BIGINT_MAX)
    pid: int = Field(ge=BIGINT_MIN, le=BIGINT_MAX)
    id: Optional[int] = Field(default=None, ge=BIGINT_MIN, le=BIGINT_MAX)

    model_config = ConfigDict(from_attributes=True)

    def validate_values(self) -> Validation:
        """
        Check every categorical field against its vocabulary.

        All failures are collected; a record with three bad fields yields
        three messages.
        """
        messages: Dict[str, str] = {}
        for field, vocabulary_name in self.vocabulary_fields.items():
            value = getattr(self, field)
            if not vocabulary.contains(vocabulary_name, value):
                messages[field] = f"{value} is not a valid '{field}' value"
        return Validation(is_valid=not messages, messages=messages)

    def categorical_values(self) -> Dict[str, str]:
        """The columns an update is allowed to change."""
        return {field: getattr(self, field) for field in self.vocabulary_fields}

    def insert_values(self) -> Dict[str, object]:
        """Correlation columns plus categorical columns; never the id."""
        return {
            "report_uid": self.report_uid,
            "eid": self.eid,
            "pid": self.pid,
            **self.categorical_values(),
        }


class StrokeFeature(FeatureRecord):
    """Ischemic or hemorrhagic lesion described in a report."""

    vocabulary_fields: ClassVar[Dict[str, str]] = {
        "kind": "Kind",
        "temporal": "Temporal",
        "location": "Locations",
        "side": "Side",
        "extent": "Extent",
    }

    kind: str
    temporal: str
    location: str
    side: str
    extent: str


class AngioFeature(FeatureRecord):
    """Finding on a named vessel from CT/MR angiography."""

    vocabulary_fields: ClassVar[Dict[str, str]] = {
        "vessel": "Vessels",
        "side": "Side",
        "finding": "VesselFinding",
    }

    vessel: str
    side: str
    finding: str


class DegenerativeFeature(FeatureRecord):
    """Atrophy and small-vessel disease grading."""

    vocabulary_fields: ClassVar[Dict[str, str]] = {
        "cortical_atrophy": "Grade",
        "cortical_atrophy_description": "CorticalAtrophyDescription",
        "central_atrophy": "Grade",
        "microangiopathy": "Grade",
    }

    cortical_atrophy: str
    cortical_atrophy_description: str
    central_atrophy: str
    microangiopathy: str


FEATURE_RECORDS: Dict[FeatureKind, Type[FeatureRecord]] = {
    FeatureKind.STROKE: StrokeFeature,
    FeatureKind.ANGIO: AngioFeature,
    FeatureKind.DEGENERATIVE: DegenerativeFeature,
}


class ReportFeatures(BaseModel):
    """
    Every feature attached to one report, grouped by kind.

    Serialized with the keys StrokeFeatures / AngioFeatures /
    DegenerativeFeatures that the annotation front-end reads.
    """

    stroke_features: List[StrokeFeature] = Field(default_factory=list, alias="StrokeFeatures")
    angio_features: List[AngioFeature] = Field(default_factory=list, alias="AngioFeatures")
    degenerative_features: List[DegenerativeFeature] = Field(
        default_factory=list, alias="DegenerativeFeatures"
    )

    model_config = ConfigDict(populate_by_name=True)


# Any single feature record; each variant has required fields the others lack,
# so a serialized record always matches exactly one member.
AnyFeature = Union[StrokeFeature, AngioFeature, DegenerativeFeature]
