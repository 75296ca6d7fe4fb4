"""
HISS Backend — Shared Response Schemas
=======================================

What:  The save envelope returned by every mutating endpoint, plus the
       error and health payloads, and the BIGINT bounds applied to identifiers.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field

# Identifier columns are BIGINT; values outside this range are refused with
# 422 before they reach the driver.
BIGINT_MIN = -(2**63)
BIGINT_MAX = 2**63 - 1


class SaveResult(BaseModel):
    """
    Envelope for POST / PUT / DELETE on /features/{kind}.

    Examples:
        saved:     {"error": false, "data": null, "id": 42}
        rejected:  {"error": true, "data": {"side": "up is not a valid 'side' value"}, "id": null}

    A vocabulary rejection is returned with HTTP 200 and error=true;
    clients render `data` next to the offending form fields.
    """
    error: bool = Field(description="True when the record was rejected")
    data: Optional[Dict[str, str]] = Field(
        default=None,
        description="Field name → message for every rejected field",
    )
    id: Optional[int] = Field(default=None, description="Identifier of the affected record")


class ErrorResponse(BaseModel):
    """
    Standardized error response for 4xx/5xx answers.

    Example:
        {
            "error": "bad_request",
            "message": "`tumor` is not a valid 'feature' path segment",
            "details": {"kind": "tumor", "allowed": ["stroke", "angio", "degenerative"]},
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
