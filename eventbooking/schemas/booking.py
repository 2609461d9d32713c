"""
Booking write schemas
"""

from typing import Any, Dict, Tuple
from pydantic import BaseModel, Field, field_validator

from eventbooking.schemas.common import PyObjectId

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
EMAIL_MAX_LENGTH = 254

class BookingCreate(BaseModel):
    """Schema for creating a booking"""
    event_id: PyObjectId = Field(..., alias="eventId")
    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LENGTH, pattern=EMAIL_PATTERN)

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

class BookingUpdate(BaseModel):
    """Partial booking update"""
    event_id: PyObjectId | None = Field(None, alias="eventId")
    email: str | None = None

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True

BOOKING_MESSAGES: Dict[Tuple[str, str], str] = {
    ("eventId", "missing"): "Event ID is required",
    ("eventId", "value_error"): "Event ID must be a valid ObjectId",
    ("email", "missing"): "Email is required",
    ("email", "string_too_short"): "Email is required",
    ("email", "string_too_long"): f"Email cannot exceed {EMAIL_MAX_LENGTH} characters",
    ("email", "string_pattern_mismatch"): "Please provide a valid email address",
}
