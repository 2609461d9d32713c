"""
Event model
"""

from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, Field
from pymongo import ASCENDING, IndexModel

from eventbooking.schemas.common import PyObjectId

class Event(BaseModel):
    """Event as stored in the `events` collection"""

    COLLECTION: ClassVar[str] = "events"
    INDEXES: ClassVar[List[IndexModel]] = [
        IndexModel([("slug", ASCENDING)], unique=True, name="slug_1"),
    ]

    id: Optional[PyObjectId] = Field(None, alias="_id")
    title: str
    slug: str = ""
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM, 24-hour
    mode: str
    audience: str
    agenda: List[str]
    organizer: str
    tags: List[str]
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
    def from_document(cls, doc: Optional[Dict[str, Any]]) -> Optional["Event"]:
        if doc is None:
            return None
        return cls.model_validate(doc)
