"""
Event write schemas
"""

from typing import Dict, List, Literal, Tuple
from pydantic import BaseModel, Field

EVENT_MODES = ("online", "offline", "hybrid")

class EventCreate(BaseModel):
    """Fields a caller supplies for an Event. slug, date and time are normalized later."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    overview: str = Field(..., min_length=1, max_length=1000)
    image: str = Field(..., min_length=1)
    venue: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1)
    time: str = Field(..., min_length=1)
    mode: Literal["online", "offline", "hybrid"]
    audience: str = Field(..., min_length=1)
    agenda: List[str] = Field(..., min_length=1)
    organizer: str = Field(..., min_length=1)
    tags: List[str] = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True

class EventUpdate(BaseModel):
    """Partial update; only fields that were set are applied"""
    title: str | None = None
    description: str | None = None
    overview: str | None = None
    image: str | None = None
    venue: str | None = None
    location: str | None = None
    date: str | None = None
    time: str | None = None
    mode: str | None = None
    audience: str | None = None
    agenda: List[str] | None = None
    organizer: str | None = None
    tags: List[str] | None = None


def _required(field: str, label: str, verb: str = "is") -> Dict[Tuple[str, str], str]:
    text = f"{label} {verb} required"
    return {(field, "missing"): text, (field, "string_too_short"): text}

EVENT_MESSAGES: Dict[Tuple[str, str], str] = {
    **_required("title", "Title"),
    **_required("description", "Description"),
    **_required("overview", "Overview"),
    **_required("image", "Image URL"),
    **_required("venue", "Venue"),
    **_required("location", "Location"),
    **_required("date", "Date"),
    **_required("time", "Time"),
    **_required("mode", "Mode"),
    **_required("audience", "Audience"),
    **_required("agenda", "Agenda"),
    **_required("organizer", "Organizer"),
    **_required("tags", "Tags", "are"),
    ("title", "string_too_long"): "Title cannot exceed 200 characters",
    ("description", "string_too_long"): "Description cannot exceed 2000 characters",
    ("overview", "string_too_long"): "Overview cannot exceed 1000 characters",
    ("mode", "literal_error"): "Mode must be online, offline, or hybrid",
    ("agenda", "too_short"): "Agenda must contain at least one item",
    ("tags", "too_short"): "At least one tag is required",
}
