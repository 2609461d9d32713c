"""
Repository layer over the MongoDB collections.

Writes go through the normalization services first, then a single
insert/replace. Unique indexes are enforced by the server at commit.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from bson import ObjectId
from pydantic import BaseModel
from pymongo.errors import DuplicateKeyError

from eventbooking.core.db import ConnectionCache, get_connection_cache
from eventbooking.core.exceptions import (
    DuplicateRecordError,
    RecordNotFoundError,
    ReferenceValidationError,
)
from eventbooking.models import Booking, Event
from eventbooking.schemas.common import to_object_id
from eventbooking.services.booking_service import BookingService
from eventbooking.services.event_service import EventService

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _duplicate(collection: str, exc: DuplicateKeyError) -> DuplicateRecordError:
    details = exc.details or {}
    return DuplicateRecordError(collection, details.get("keyValue"))


def _object_id(value: Any) -> ObjectId:
    try:
        return to_object_id(value)
    except ValueError as exc:
        raise RecordNotFoundError("Record", value) from exc


class _Repo:
    model: type

    def __init__(self, cache: Optional[ConnectionCache] = None):
        self.cache = cache or get_connection_cache()

    @property
    def collection(self):
        return self.cache.database()[self.model.COLLECTION]

    def ensure_indexes(self) -> List[str]:
        return self.collection.create_indexes(self.model.INDEXES)

    def _persist(self, record):
        """Insert a new record or replace the stored one, stamping timestamps."""
        now = _utcnow()
        record = record.model_copy(update={"updated_at": now})
        try:
            if record.id is None:
                record = record.model_copy(update={"created_at": now})
                result = self.collection.insert_one(record.to_document())
                record = record.model_copy(update={"id": result.inserted_id})
                logger.debug("Inserted %s %s", self.model.COLLECTION, record.id)
            else:
                result = self.collection.replace_one({"_id": record.id}, record.to_document())
                if result.matched_count == 0:
                    raise RecordNotFoundError(self.model.__name__, record.id)
                logger.debug("Replaced %s %s", self.model.COLLECTION, record.id)
        except DuplicateKeyError as exc:
            raise _duplicate(self.model.COLLECTION, exc) from exc
        return record

    def get(self, record_id: Any):
        try:
            oid = to_object_id(record_id)
        except ValueError:
            return None
        return self.model.from_document(self.collection.find_one({"_id": oid}))

    def _require(self, record_id: Any):
        record = self.get(record_id)
        if record is None:
            raise RecordNotFoundError(self.model.__name__, record_id)
        return record

    def delete_many(self, filter: Optional[Dict[str, Any]] = None) -> int:
        return self.collection.delete_many(filter or {}).deleted_count


# -------- Event repository --------

class EventRepo(_Repo):
    model = Event

    def save(self, event: Event) -> Event:
        """Persist an Event already produced by EventService.normalize"""
        return self._persist(event)

    def create(self, data: Union[Mapping[str, Any], BaseModel]) -> Event:
        return self.save(EventService.normalize(data))

    def update(self, event_id: Any, changes: Union[Mapping[str, Any], BaseModel]) -> Event:
        previous = self._require(event_id)
        return self.save(EventService.normalize(changes, previous))

    def get_by_slug(self, slug: str) -> Optional[Event]:
        return Event.from_document(self.collection.find_one({"slug": slug}))

    def exists(self, event_id: Any) -> bool:
        try:
            oid = to_object_id(event_id)
        except ValueError:
            return False
        return self.collection.count_documents({"_id": oid}, limit=1) > 0

    def list(self) -> List[Event]:
        return [Event.from_document(doc) for doc in self.collection.find({})]

    def delete(self, event_id: Any) -> None:
        """Delete an Event. Refused while any Booking still references it."""
        oid = _object_id(event_id)
        bookings = self.cache.database()[Booking.COLLECTION]
        if bookings.count_documents({"eventId": oid}, limit=1):
            raise ReferenceValidationError(f"Event with ID {oid} still has bookings")
        if self.collection.delete_one({"_id": oid}).deleted_count == 0:
            raise RecordNotFoundError("Event", event_id)


# -------- Booking repository --------

class BookingRepo(_Repo):
    model = Booking

    def __init__(self, cache: Optional[ConnectionCache] = None, events: Optional[EventRepo] = None):
        super().__init__(cache)
        self.events = events or EventRepo(self.cache)

    def save(self, booking: Booking) -> Booking:
        return self._persist(booking)

    def create(self, data: Union[Mapping[str, Any], BaseModel]) -> Booking:
        return self.save(BookingService.validate(data, self.events.exists))

    def update(self, booking_id: Any, changes: Union[Mapping[str, Any], BaseModel]) -> Booking:
        previous = self._require(booking_id)
        return self.save(BookingService.validate(changes, self.events.exists, previous))

    def get_with_event(self, booking_id: Any) -> Dict[str, Any]:
        """Booking with its referenced Event populated (None if the Event is gone)"""
        booking = self._require(booking_id)
        return {"booking": booking, "event": self.events.get(booking.event_id)}

    def list_for_event(self, event_id: Any) -> List[Booking]:
        cursor = self.collection.find({"eventId": _object_id(event_id)})
        return [Booking.from_document(doc) for doc in cursor]

    def count_for_event(self, event_id: Any) -> int:
        return self.collection.count_documents({"eventId": _object_id(event_id)})
