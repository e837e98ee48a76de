"""Event domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_non_negative
from ...utils.sanitization import clean_text


class EventCreate(BaseModel):
    """Schema for posting a new event"""

    title: str
    description: Optional[str] = None
    date: Optional[datetime] = None
    guests: Optional[int] = None
    city: Optional[str] = None
    budget: Optional[float] = None
    address: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        v = clean_text(v, max_length=255)
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("description", "city", "address")
    @classmethod
    def validate_text(cls, v):
        return clean_text(v)

    @field_validator("guests")
    @classmethod
    def validate_guests(cls, v):
        return validate_non_negative(v, "Guests")

    @field_validator("budget")
    @classmethod
    def validate_budget(cls, v):
        return validate_non_negative(v, "Budget")


class EventResponse(BaseModel):
    """Schema for event response"""

    id: int
    owner_id: int
    title: str
    description: Optional[str] = None
    date: Optional[datetime] = None
    guests: Optional[int] = None
    city: Optional[str] = None
    budget: Optional[float] = None
    address: Optional[str] = None
    photos: list[str] = []
    status: Literal["open", "booked"]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("photos", mode="before")
    @classmethod
    def default_photos(cls, v):
        return v or []


class OpenEventFilters(BaseModel):
    """Query filters for browsing open events"""

    city: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    min_guests: Optional[int] = None
    max_guests: Optional[int] = None
    sort: Literal["soonest", "newest", "oldest"] = "soonest"
