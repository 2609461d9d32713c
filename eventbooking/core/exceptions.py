"""
Error types raised by the data layer
"""

from typing import Any, Dict, List, Optional


class EventBookingError(Exception):
    """Base class for every error raised by this package"""


class ConfigurationError(EventBookingError):
    """Required configuration is missing; fatal at startup"""


class RecordValidationError(EventBookingError):
    """A field failed its constraint. The record was not persisted."""

    def __init__(self, field: str, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.field = field
        self.message = message
        self.errors = errors or [{"field": field, "message": message}]


class ReferenceValidationError(EventBookingError):
    """A Booking points at an Event that does not exist or could not be checked"""


class DuplicateRecordError(EventBookingError):
    """A unique index rejected the write"""

    def __init__(self, collection: str, key: Optional[Dict[str, Any]] = None):
        self.collection = collection
        self.key = key or {}
        detail = ", ".join(f"{k}={v!r}" for k, v in self.key.items())
        message = f"Duplicate {collection} record"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class RecordNotFoundError(EventBookingError):
    """Lookup by identity found nothing"""

    def __init__(self, resource: str, record_id: Any):
        self.resource = resource
        self.record_id = record_id
        super().__init__(f"{resource} with ID {record_id} not found")
