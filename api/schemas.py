"""
Pydantic schemas for Appeal AI API request/response models.

The appeal request body is intentionally loose: mobile clients send
fineDetails and appealReason in several shapes, and the normalizer in
services.normalizer is responsible for making sense of them.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================


class AppealStrength(str, Enum):
    """Appeal strength classification."""

    STRONG = "strong"
    MEDIUM = "medium"
    WEAK = "weak"


class RecoveryStatus(str, Enum):
    """How a structured result was obtained from upstream text."""

    PARSED = "parsed"
    RECOVERED = "recovered"
    FALLBACK = "fallback"
    FAILED = "failed"


RECOVERY_STATUS_HEADER = "X-Recovery-Status"


# =============================================================================
# Request Models
# =============================================================================


class AppealCheckRequest(BaseModel):
    """Request body for an appeal strength check."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    fine_details: Any = Field(default=None, alias="fineDetails")
    appeal_reason: Any = Field(default=None, alias="appealReason")


# =============================================================================
# Response Models
# =============================================================================


class AppealAssessment(BaseModel):
    """Appeal assessment returned to the client.

    confidence_score is documented as 0-100 but is not range checked; the
    upstream value is passed through as-is.
    """

    model_config = ConfigDict(extra="allow")

    appeal_strength: AppealStrength | str
    confidence_score: Any
    reasoning_summary: str


class ExtractedFineData(BaseModel):
    """Fields read from a photographed fine notice."""

    fineAmount: Any = ""
    infractionDate: Any = ""
    locationAddress: Any = ""
    carRegistration: Any = ""
    fineReferenceNumber: Any = ""
    allegedContravention: Any = ""


class ExtractFineResponse(BaseModel):
    """Envelope for a successful extraction."""

    success: bool = True
    data: ExtractedFineData


class ErrorResponse(BaseModel):
    """Error payload shared by all routes."""

    error: str
    details: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "OK"
    message: str
