"""Bid domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel

from ..events.schemas import EventResponse


class BidCreate(BaseModel):
    """Schema for placing a bid

    ``amount`` is taken as sent and validated by the service, so booleans and
    non-numeric strings get the same 400 as zero or negative amounts.
    """

    amount: Any = None
    message: Optional[str] = None


class CatererSummary(BaseModel):
    id: int
    display_name: Optional[str] = None
    company_name: Optional[str] = None
    logo_url: Optional[str] = None

    class Config:
        from_attributes = True


class BidResponse(BaseModel):
    """Schema for bid response"""

    id: int
    event_id: int
    caterer_id: int
    amount: float
    message: Optional[str] = None
    status: Literal["sent", "accepted", "rejected"]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EventBidResponse(BidResponse):
    """A bid as the event owner sees it"""

    caterer: Optional[CatererSummary] = None


class MyBidResponse(BidResponse):
    """A bid as the caterer who placed it sees it"""

    event_title: Optional[str] = None
    event_status: Optional[Literal["open", "booked"]] = None


class AcceptBidResponse(BaseModel):
    chat_id: int
    redirect_to: str
    bid: BidResponse
    event: EventResponse
