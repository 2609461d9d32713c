"""
Event normalization service

Runs before every Event write: checks field rules, then derives slug, date
and time from whichever source fields are new or changed.
"""

import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

from eventbooking.core.exceptions import RecordValidationError
from eventbooking.models import Event
from eventbooking.schemas.common import validate_payload
from eventbooking.schemas.event import EVENT_MESSAGES, EventCreate

DATE_ERROR = "Date must be in a valid format (YYYY-MM-DD or ISO string)"
TIME_ERROR = "Time must be in HH:MM format"

# Python's \w is Unicode-aware; slugs keep ASCII word characters only
_SLUG_STRIP = re.compile(r"[^A-Za-z0-9_\s-]")
_SLUG_SEPARATORS = re.compile(r"[\s_-]+")
_STRICT_TIME = re.compile(r"([01]?[0-9]|2[0-3]):([0-5][0-9])")

_DATE_FORMATS = ("%b %d, %Y", "%B %d, %Y", "%m/%d/%Y", "%d %b %Y", "%d %B %Y")
_TIME_FORMATS = ("%H:%M:%S", "%H:%M:%S.%f", "%I:%M %p", "%I:%M%p", "%I %p", "%I%p")

EDITABLE_FIELDS = frozenset(EventCreate.model_fields)


class EventService:
    """Service for Event validation and derived fields"""

    @staticmethod
    def slugify(title: str) -> str:
        """URL-safe slug; may be empty when nothing ASCII survives"""
        slug = title.lower().strip()
        slug = _SLUG_STRIP.sub("", slug)
        slug = _SLUG_SEPARATORS.sub("-", slug)
        return slug.strip("-")

    @staticmethod
    def normalize_date(value: str) -> str:
        """Return the UTC calendar day of `value` as YYYY-MM-DD"""
        text = value.strip()
        parsed: Optional[datetime] = None
        try:
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            parsed = datetime.fromisoformat(text)
        except ValueError:
            for fmt in _DATE_FORMATS:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
        if parsed is None:
            raise RecordValidationError("date", DATE_ERROR)

        # Naive values are read as UTC
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.date().isoformat()

    @staticmethod
    def normalize_time(value: str) -> str:
        """Return `value` as zero-padded 24-hour HH:MM"""
        text = value.strip()
        match = _STRICT_TIME.fullmatch(text)
        if match:
            return f"{int(match.group(1)):02d}:{match.group(2)}"

        for fmt in _TIME_FORMATS:
            try:
                return datetime.strptime(text.upper(), fmt).strftime("%H:%M")
            except ValueError:
                continue
        raise RecordValidationError("time", TIME_ERROR)

    @staticmethod
    def normalize(
        changes: Union[Mapping[str, Any], BaseModel],
        previous: Optional[Event] = None,
    ) -> Event:
        """Validate and canonicalize an Event candidate without touching storage.

        `previous` is the stored record being updated, or None for a new Event.
        Derived fields are recomputed only when their source field differs
        from the stored value.
        """
        if isinstance(changes, BaseModel):
            changes = changes.model_dump(exclude_unset=True)

        fields = previous.model_dump(include=set(EDITABLE_FIELDS)) if previous else {}
        fields.update({k: v for k, v in changes.items() if k in EDITABLE_FIELDS})
        candidate = validate_payload(EventCreate, fields, EVENT_MESSAGES)

        def changed(name: str) -> bool:
            return previous is None or getattr(previous, name) != getattr(candidate, name)

        slug = EventService.slugify(candidate.title) if changed("title") else previous.slug
        date = EventService.normalize_date(candidate.date) if changed("date") else candidate.date
        time = EventService.normalize_time(candidate.time) if changed("time") else candidate.time

        if not candidate.agenda:
            raise RecordValidationError("agenda", "Agenda cannot be empty")
        if not candidate.tags:
            raise RecordValidationError("tags", "Tags cannot be empty")

        return Event(
            id=previous.id if previous else None,
            slug=slug,
            date=date,
            time=time,
            created_at=previous.created_at if previous else None,
            updated_at=previous.updated_at if previous else None,
            **candidate.model_dump(exclude={"date", "time"}),
        )
