"""
HISS Backend — Radiology Report SQLAlchemy Model
=================================================

What:  ORM model for the `radiology` table holding source reports.
Who:   Read by ReportRepository; rows are loaded by the hospital export,
       never written by this service.

Table Design Notes:
    - id: surrogate row number. Listing orders by it, which is the order the
      export inserted the reports in.
    - report_uid: the hospital's report identifier. Feature rows correlate on
      this column, hence the unique index.
    - pid: most listing queries filter by patient, hence the index.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hiss.database import Base

# BIGINT on PostgreSQL; INTEGER on SQLite so the primary key aliases ROWID
# and autoincrements.
Identifier = BigInteger().with_variant(Integer, "sqlite")


class Radiology(Base):
    """One radiology report. Immutable from this service's point of view."""

    __tablename__ = "radiology"

    id: Mapped[int] = mapped_column(Identifier, primary_key=True, autoincrement=True)

    pid: Mapped[int] = mapped_column(BigInteger, nullable=False, comment="Patient identifier")
    eid: Mapped[int] = mapped_column(BigInteger, nullable=False, comment="Encounter identifier")
    order_uid: Mapped[int] = mapped_column(BigInteger, nullable=False, comment="Order identifier")

    examination: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    request: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    ordered_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    discipline: Mapped[str] = mapped_column(String(255), nullable=False)

    report_uid: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        unique=True,
        comment="Report identifier used to correlate feature rows",
    )

    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    examination_started_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    report_type: Mapped[str] = mapped_column(String(255), nullable=False)
    report: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("idx_radiology_pid", "pid"),
    )

    def __repr__(self) -> str:
        return f"<Radiology(id={self.id}, report_uid={self.report_uid}, pid={self.pid})>"
