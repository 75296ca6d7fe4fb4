"""
HISS Backend — Radiology Report Schema
=======================================

What:  Response model for a source radiology report.
Who:   Returned by GET /radiology/records/... as array items.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class RadiologyReport(BaseModel):
    """
    A report as shown to annotators. The surrogate row id is not exposed;
    clients address reports by report_uid.
    """
    pid: int = Field(description="Patient identifier")
    eid: int = Field(description="Encounter identifier")
    order_uid: int = Field(description="Order identifier")
    examination: Optional[str] = Field(default=None, description="Examination description")
    request: Optional[str] = Field(default=None, description="Referral question")
    ordered_at: datetime = Field(description="When the examination was ordered")
    discipline: str
    report_uid: int = Field(description="Report identifier used to correlate features")
    comment: str
    examination_started_at: datetime
    report_type: str
    report: str = Field(description="Full report text")

    model_config = {"from_attributes": True}
