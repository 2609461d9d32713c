"""
Pydantic write schemas package
"""

from .common import *
from .event import *
from .booking import *

__all__ = [
    "PyObjectId",
    "validate_payload",
    "EventCreate",
    "EventUpdate",
    "EVENT_MESSAGES",
    "BookingCreate",
    "BookingUpdate",
    "BOOKING_MESSAGES",
]
