"""Review domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class ReviewUpsert(BaseModel):
    """Schema for placing or updating a review; the rating is checked by the service"""

    rating: Any = None
    comment: Optional[str] = None


class ReviewResponse(BaseModel):
    """Schema for review response"""

    id: int
    event_id: int
    owner_id: int
    caterer_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    owner_name: Optional[str] = None

    class Config:
        from_attributes = True


class CatererReviewsResponse(BaseModel):
    caterer_id: int
    average_rating: Optional[float] = None
    count: int = 0
    reviews: list[ReviewResponse] = []
