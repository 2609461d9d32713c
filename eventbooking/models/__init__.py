"""
Stored record models
"""

from .event import Event
from .booking import Booking

__all__ = ["Event", "Booking"]
