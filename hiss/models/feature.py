"""
HISS Backend — Feature SQLAlchemy Models
=========================================

What:  One table per feature kind: stroke_features, angio_features,
       degenerative_features.
How:   Shared correlation columns (id, report_uid, eid, pid) live on a mixin;
       each model adds its categorical columns. Column names equal the JSON
       field names, so records map onto rows one-to-one.

Query Patterns:
    - All features of a report: WHERE report_uid = :ruid ORDER BY id
      → idx_<table>_report_uid
    - Update / delete:           WHERE id = :id → primary key
"""

from typing import Dict, Type

from sqlalchemy import BigInteger, Index, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from hiss.database import Base
from hiss.models.radiology import Identifier


class FeatureColumns:
    """Columns shared by every feature table."""

    id: Mapped[int] = mapped_column(Identifier, primary_key=True, autoincrement=True)
    report_uid: Mapped[int] = mapped_column(BigInteger, nullable=False)
    eid: Mapped[int] = mapped_column(BigInteger, nullable=False)
    pid: Mapped[int] = mapped_column(BigInteger, nullable=False)

    @declared_attr.directive
    def __table_args__(cls):
        return (Index(f"idx_{cls.__tablename__}_report_uid", "report_uid"),)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id}, report_uid={self.report_uid})>"


class StrokeFeatureRow(FeatureColumns, Base):
    __tablename__ = "stroke_features"

    kind: Mapped[str] = mapped_column(String(64), nullable=False)
    temporal: Mapped[str] = mapped_column(String(64), nullable=False)
    location: Mapped[str] = mapped_column(String(64), nullable=False)
    side: Mapped[str] = mapped_column(String(64), nullable=False)
    extent: Mapped[str] = mapped_column(String(64), nullable=False)


class AngioFeatureRow(FeatureColumns, Base):
    __tablename__ = "angio_features"

    vessel: Mapped[str] = mapped_column(String(64), nullable=False)
    side: Mapped[str] = mapped_column(String(64), nullable=False)
    finding: Mapped[str] = mapped_column(String(64), nullable=False)


class DegenerativeFeatureRow(FeatureColumns, Base):
    __tablename__ = "degenerative_features"

    cortical_atrophy: Mapped[str] = mapped_column(String(64), nullable=False)
    cortical_atrophy_description: Mapped[str] = mapped_column(String(64), nullable=False)
    central_atrophy: Mapped[str] = mapped_column(String(64), nullable=False)
    microangiopathy: Mapped[str] = mapped_column(String(64), nullable=False)


# Keyed by the FeatureKind value; see hiss.schemas.feature
FEATURE_TABLES: Dict[str, Type[FeatureColumns]] = {
    "stroke": StrokeFeatureRow,
    "angio": AngioFeatureRow,
    "degenerative": DegenerativeFeatureRow,
}
