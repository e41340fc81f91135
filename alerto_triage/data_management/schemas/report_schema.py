"""Community report schema.

A report is owned by its submitter. Only the triage state machine changes its
``status``; the pipeline-written fields (``credibility_score``, ``flags``,
``ai_summary``) are replaced in full on every automated analysis.

Snapshot fields are optional on purpose: the credibility scorer treats a
missing field as a failed check instead of refusing the report.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


class ReportCategory(str, Enum):
    """Report categories from both the backend model and the submission form."""

    FLOODING = "flooding"
    HEAVY_RAIN = "heavy_rain"
    LANDSLIDE = "landslide"
    STRONG_WIND = "strong_wind"
    STORM = "storm"
    ROAD_BLOCKAGE = "road_blockage"
    POWER_OUTAGE = "power_outage"
    TRAFFIC = "traffic"
    POWER = "power"
    INFRASTRUCTURE = "infrastructure"
    WEATHER = "weather"
    EMERGENCY = "emergency"
    OTHER = "other"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ReportStatus(str, Enum):
    """Report lifecycle status.

    PENDING: Newly created or awaiting a decision.
    VERIFIED: Confirmed credible (by the scorer or an administrator).
    INVESTIGATING: An administrator is following up.
    RESOLVED: The reported situation has been handled.
    FALSE_REPORT: Judged not credible.
    """

    PENDING = "pending"
    VERIFIED = "verified"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    FALSE_REPORT = "false_report"


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)


class Location(BaseModel):
    """Where the event was observed.

    ``barangay`` is the locality field; ``locality`` is accepted as an input
    alias.
    """

    barangay: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("barangay", "locality"),
        description="Locality (barangay) name",
    )
    city: Optional[str] = Field(default=None, description="City or municipality")
    province: Optional[str] = Field(default=None, description="Province")
    address: Optional[str] = Field(default=None, description="Free-form street address")
    coordinates: Optional[Coordinates] = Field(default=None)

    def has_any_field(self) -> bool:
        """True if at least one location subfield is populated."""
        texts = (self.barangay, self.city, self.province, self.address)
        return self.coordinates is not None or any(_filled(t) for t in texts)

    def is_specific(self) -> bool:
        """True if both locality and city are populated."""
        return _filled(self.barangay) and _filled(self.city)


class ImageRef(BaseModel):
    url: str = Field(..., description="Storage URL of the uploaded image")
    filename: Optional[str] = Field(default=None)
    uploaded_at: Optional[datetime] = Field(default=None)


class Resolution(BaseModel):
    description: Optional[str] = Field(default=None, description="Resolution note")
    resolved_by: Optional[str] = Field(default=None, description="Resolving operator id")
    resolved_at: Optional[datetime] = Field(default=None)
    actions: list[str] = Field(default_factory=list)


class Report(BaseModel):
    """Community-submitted hazard report."""

    # Identity
    report_id: str = Field(
        default_factory=lambda: uuid.uuid4().hex,
        description="Opaque unique report identifier",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    # Content
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    category: Optional[ReportCategory] = Field(default=None)
    severity: Optional[Severity] = Field(default=None)
    location: Optional[Location] = Field(default=None)
    images: list[ImageRef] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    reporter_id: Optional[str] = Field(default=None, description="Submitting user id")

    # Lifecycle
    status: ReportStatus = Field(default=ReportStatus.PENDING)
    verified_by: Optional[str] = Field(default=None)
    verified_at: Optional[datetime] = Field(default=None)
    resolution: Optional[Resolution] = Field(default=None)

    # Written only by the triage pipeline
    credibility_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    flags: list[str] = Field(default_factory=list)
    ai_summary: Optional[str] = Field(default=None)

    @field_validator("category", mode="before")
    @classmethod
    def drop_unknown_category(cls, value: Any) -> Any:
        """Category does not affect triage; an unrecognised one reads as unset."""
        if isinstance(value, ReportCategory):
            return value
        try:
            return ReportCategory(value)
        except ValueError:
            return None

    @field_validator("images", mode="before")
    @classmethod
    def coerce_image_refs(cls, value: Any) -> Any:
        """Accept bare URLs or upload ids in place of full image records."""
        if value is None:
            return []
        if isinstance(value, list):
            return [
                item if isinstance(item, (dict, ImageRef)) else {"url": str(item)}
                for item in value
            ]
        return value


def _filled(value: Optional[str]) -> bool:
    return bool(value and value.strip())
