"""Administrator notification schema."""

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    NEW_HIGH_PRIORITY_REPORT = "new_high_priority_report"


class Notification(BaseModel):
    """One notification for one administrator about one report.

    Created only by the fan-out; afterwards only the reading subsystem
    touches it (``read``).
    """

    notification_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    user_id: str = Field(..., description="Recipient administrator id")
    type: NotificationType = Field(default=NotificationType.NEW_HIGH_PRIORITY_REPORT)
    report_id: str = Field(...)
    title: str = Field(...)
    message: str = Field(..., description="Analysis summary")
    credibility_score: float = Field(..., ge=0.0, le=1.0)
    read: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
