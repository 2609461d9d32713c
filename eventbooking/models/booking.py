"""
Booking model
"""

from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, Field
from pymongo import ASCENDING, IndexModel

from eventbooking.schemas.common import PyObjectId

class Booking(BaseModel):
    """Booking as stored in the `bookings` collection"""

    COLLECTION: ClassVar[str] = "bookings"
    INDEXES: ClassVar[List[IndexModel]] = [
        IndexModel([("eventId", ASCENDING)], name="eventId_1"),
        # One booking per email per event
        IndexModel([("eventId", ASCENDING), ("email", ASCENDING)], unique=True, name="eventId_1_email_1"),
    ]

    id: Optional[PyObjectId] = Field(None, alias="_id")
    event_id: PyObjectId = Field(..., alias="eventId")  # non-owning reference to Event._id
    email: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True, exclude={"id"})
        if self.id is not None:
            doc["_id"] = self.id
        return doc

    @classmethod
    def from_document(cls, doc: Optional[Dict[str, Any]]) -> Optional["Booking"]:
        if doc is None:
            return None
        return cls.model_validate(doc)
