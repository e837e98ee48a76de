"""Bid router - FastAPI endpoints for the bid lifecycle"""

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ...auth import AuthContext, get_auth_context
from ...database import get_db
from ...email_service import NotificationSender, get_notification_sender
from ...store import EntityStore
from .schemas import AcceptBidResponse, BidCreate, BidResponse, EventBidResponse, MyBidResponse
from .service import BidService

router = APIRouter(tags=["Bids"])


def get_bid_service(
    db: Session = Depends(get_db),
    sender: NotificationSender = Depends(get_notification_sender),
) -> BidService:
    """Dependency injection for BidService"""
    return BidService(EntityStore(db), sender)


@router.post("/events/{event_id}/bids", response_model=BidResponse)
async def submit_bid(
    event_id: int,
    data: BidCreate,
    background_tasks: BackgroundTasks,
    ctx: AuthContext = Depends(get_auth_context),
    service: BidService = Depends(get_bid_service),
):
    """Place a bid on an open event (caterers only)"""
    return service.submit_bid(ctx, event_id, data.amount, data.message, background_tasks)


@router.get("/events/{event_id}/bids", response_model=list[EventBidResponse])
async def list_event_bids(
    event_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: BidService = Depends(get_bid_service),
):
    return service.list_event_bids(ctx, event_id)


@router.post("/events/{event_id}/bids/{bid_id}/accept", response_model=AcceptBidResponse)
async def accept_bid(
    event_id: int,
    bid_id: int,
    background_tasks: BackgroundTasks,
    ctx: AuthContext = Depends(get_auth_context),
    service: BidService = Depends(get_bid_service),
):
    """Accept a bid, book the event and open the chat with the caterer"""
    return service.accept_bid(ctx, event_id, bid_id, background_tasks)


@router.post("/events/{event_id}/bids/{bid_id}/reject", response_model=list[EventBidResponse])
async def reject_bid(
    event_id: int,
    bid_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: BidService = Depends(get_bid_service),
):
    return service.reject_bid(ctx, event_id, bid_id)


@router.get("/bids/mine", response_model=list[MyBidResponse])
async def list_my_bids(
    ctx: AuthContext = Depends(get_auth_context),
    service: BidService = Depends(get_bid_service),
):
    """The caller's bids, newest first"""
    return service.list_my_bids(ctx)
