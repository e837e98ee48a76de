"""Profile domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, field_validator

from ...shared.validators import parse_specialties, validate_non_negative
from ...utils.sanitization import clean_text


class SignupRequest(BaseModel):
    """Schema for creating the profile of a freshly registered account"""

    role: Literal["owner", "caterer"]
    display_name: str

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v):
        v = clean_text(v, max_length=255)
        if not v:
            raise ValueError("Display name is required")
        return v


class ProfileUpdate(BaseModel):
    """Schema for editing the caller's own profile"""

    display_name: Optional[str] = None
    company_name: Optional[str] = None
    bio: Optional[str] = None
    city: Optional[str] = None
    website: Optional[str] = None
    specialties: Union[list[str], str, None] = None
    min_price: Optional[int] = None
    price_note: Optional[str] = None

    @field_validator("display_name", "company_name", "city", "website", "price_note")
    @classmethod
    def validate_short_text(cls, v):
        return clean_text(v, max_length=500)

    @field_validator("bio")
    @classmethod
    def validate_bio(cls, v):
        return clean_text(v)

    @field_validator("specialties")
    @classmethod
    def validate_specialties(cls, v):
        return parse_specialties(v)

    @field_validator("min_price")
    @classmethod
    def validate_min_price(cls, v):
        return validate_non_negative(v, "Minimum price")


class UserResponse(BaseModel):
    """The caller's own profile"""

    id: int
    email: Optional[str] = None
    role: Literal["owner", "caterer"]
    display_name: Optional[str] = None
    company_name: Optional[str] = None
    bio: Optional[str] = None
    specialties: list[str] = []
    logo_url: Optional[str] = None
    city: Optional[str] = None
    website: Optional[str] = None
    min_price: Optional[int] = None
    price_note: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("specialties", mode="before")
    @classmethod
    def default_specialties(cls, v):
        return v or []


class CatererProfileResponse(BaseModel):
    """Public caterer profile"""

    id: int
    display_name: Optional[str] = None
    company_name: Optional[str] = None
    bio: Optional[str] = None
    specialties: list[str] = []
    logo_url: Optional[str] = None
    city: Optional[str] = None
    website: Optional[str] = None
    min_price: Optional[int] = None
    price_note: Optional[str] = None

    class Config:
        from_attributes = True

    @field_validator("specialties", mode="before")
    @classmethod
    def default_specialties(cls, v):
        return v or []


class OwnerProfileResponse(BaseModel):
    """Public owner profile"""

    id: int
    display_name: Optional[str] = None
    city: Optional[str] = None
    logo_url: Optional[str] = None
    bio: Optional[str] = None

    class Config:
        from_attributes = True


class PortfolioItem(BaseModel):
    name: str
    url: str
