"""
Booking validation service
"""

import logging
from typing import Any, Callable, Mapping, Optional, Union

from bson import ObjectId
from pydantic import BaseModel

from eventbooking.core.exceptions import ReferenceValidationError
from eventbooking.models import Booking
from eventbooking.schemas.booking import BOOKING_MESSAGES, BookingCreate
from eventbooking.schemas.common import validate_payload

logger = logging.getLogger(__name__)

EventLookup = Callable[[ObjectId], bool]

class BookingService:
    """Service for Booking field and reference checks"""

    @staticmethod
    def check_event_reference(event_id: ObjectId, event_exists: EventLookup) -> None:
        """Fail unless `event_id` names an existing Event"""
        try:
            exists = event_exists(event_id)
        except Exception as exc:
            logger.warning("Event lookup for %s failed: %s", event_id, exc)
            detail = str(exc)
            if detail:
                raise ReferenceValidationError(f"Failed to validate event reference: {detail}") from exc
            raise ReferenceValidationError("Failed to validate event reference") from exc

        if not exists:
            raise ReferenceValidationError(f"Event with ID {event_id} does not exist")

    @staticmethod
    def validate(
        changes: Union[Mapping[str, Any], BaseModel],
        event_exists: EventLookup,
        previous: Optional[Booking] = None,
    ) -> Booking:
        """Validate a Booking candidate.

        The Event lookup runs only for a new booking or when eventId changed.
        """
        if isinstance(changes, BaseModel):
            changes = changes.model_dump(by_alias=True, exclude_unset=True)

        fields = {"eventId": previous.event_id, "email": previous.email} if previous else {}
        for key, value in changes.items():
            fields["eventId" if key == "event_id" else key] = value
        candidate = validate_payload(BookingCreate, fields, BOOKING_MESSAGES)

        if previous is None or previous.event_id != candidate.event_id:
            BookingService.check_event_reference(candidate.event_id, event_exists)

        return Booking(
            id=previous.id if previous else None,
            event_id=candidate.event_id,
            email=candidate.email,
            created_at=previous.created_at if previous else None,
            updated_at=previous.updated_at if previous else None,
        )
