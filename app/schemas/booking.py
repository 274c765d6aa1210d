import enum
import re
from datetime import datetime

from pydantic import AwareDatetime, BaseModel, field_validator

from app.schemas.flight import Flight

# Full timestamp with an explicit offset, e.g. 2025-03-10T12:00:00Z
RFC3339_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class BookingRequest(BaseModel):
    query: str
    deadline: AwareDatetime

    model_config = {"frozen": True}

    @field_validator("deadline", mode="before")
    @classmethod
    def _rfc3339_deadline(cls, v):
        if isinstance(v, datetime):
            return v
        if not isinstance(v, str) or not RFC3339_PATTERN.match(v):
            raise ValueError("deadline must be an RFC3339 timestamp, e.g. 2025-03-10T12:00:00Z")
        return v


class BookingResponse(BaseModel):
    id: str
    status: BookingStatus
    query: str
    deadline: datetime
    flight: Flight | None = None
    message: str = ""
    created_at: datetime
    updated_at: datetime


class BookingStatusResponse(BaseModel):
    id: str
    status: BookingStatus
