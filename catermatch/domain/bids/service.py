"""Bid service - Submitting, accepting and rejecting bids"""

import logging
from typing import Any, Optional

from fastapi import BackgroundTasks, HTTPException

from ...auth import AuthContext
from ...email_service import NotificationSender, send_bid_accepted_email, send_new_bid_notification
from ...models import (
    BID_ACCEPTED,
    BID_REJECTED,
    BID_SENT,
    EVENT_BOOKED,
    EVENT_OPEN,
    ROLE_CATERER,
    Bid,
    Event,
)
from ...shared.validators import validate_bid_amount
from ...store import EntityStore, StoreError
from ...utils.sanitization import clean_text
from ..chats.repository import ChatRepository
from ..events.repository import EventRepository
from ..events.schemas import EventResponse
from .repository import BidRepository
from .schemas import (
    AcceptBidResponse,
    BidResponse,
    EventBidResponse,
    MyBidResponse,
)

logger = logging.getLogger(__name__)


class BidService:
    """Service layer for the bid lifecycle"""

    def __init__(self, store: EntityStore, sender: NotificationSender):
        self.store = store
        self.sender = sender
        self.repo = BidRepository()

    # ------------------------------------------------------------------ #
    # Lookups
    # ------------------------------------------------------------------ #

    def _get_event(self, event_id: int) -> Event:
        event = EventRepository.get_event(self.store, event_id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    def _get_owned_event(self, ctx: AuthContext, event_id: int) -> Event:
        event = self._get_event(event_id)
        if event.owner_id != ctx.caller_id:
            raise HTTPException(status_code=403, detail="Only the event owner can manage its bids")
        return event

    def _get_event_bid(self, event_id: int, bid_id: int) -> Bid:
        bid = self.repo.get_bid(self.store, bid_id)
        if not bid or bid.event_id != event_id:
            raise HTTPException(status_code=404, detail="Bid not found")
        return bid

    def _email_for(self, user_id: int) -> Optional[str]:
        """Registered email of a user, or None when it cannot be resolved"""
        try:
            user = self.store.get("users", {"id": user_id})
        except StoreError as e:
            logger.warning(f"⚠️ Could not resolve email for user {user_id}: {e}")
            return None
        return user.email if user else None

    # ------------------------------------------------------------------ #
    # Workflow
    # ------------------------------------------------------------------ #

    def submit_bid(
        self,
        ctx: AuthContext,
        event_id: int,
        amount: Any,
        message: Optional[str],
        background_tasks: BackgroundTasks,
    ) -> Bid:
        """
        Place a bid on an open event.

        All checks run before the insert. After it commits, the event owner
        is emailed in the background.
        """
        if ctx.caller_role != ROLE_CATERER:
            raise HTTPException(status_code=403, detail="Only caterers can place bids")

        event = self._get_event(event_id)
        if event.status != EVENT_OPEN:
            raise HTTPException(status_code=409, detail="This event is no longer accepting bids")

        try:
            amount = validate_bid_amount(amount)
            message = clean_text(message)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        try:
            bid = self.repo.create_bid(self.store, event_id, ctx.caller_id, amount, message)
        except StoreError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e

        logger.info(f"✅ Bid {bid.id} of {amount:.2f} placed on event {event_id} by caterer {ctx.caller_id}")

        owner_email = self._email_for(event.owner_id)
        if owner_email:
            background_tasks.add_task(
                send_new_bid_notification,
                self.sender,
                to=owner_email,
                event_id=event_id,
                event_title=event.title,
                amount=amount,
                message=message,
            )
        else:
            logger.info(f"📭 Event {event_id} owner has no email, skipping new bid notification")

        return bid

    def accept_bid(
        self,
        ctx: AuthContext,
        event_id: int,
        bid_id: int,
        background_tasks: BackgroundTasks,
    ) -> AcceptBidResponse:
        """
        Accept a bid and book the event.

        The steps are separate commits: accept the bid, book the event,
        reject every other bid still sent, then find or open the chat with
        the caterer. A failed step stops the sequence and leaves the earlier
        steps in place; the 500 carries the event and bids as re-read
        afterwards.
        """
        event = self._get_owned_event(ctx, event_id)
        bid = self._get_event_bid(event_id, bid_id)
        if bid.status != BID_SENT:
            raise HTTPException(status_code=409, detail=f"Bid is already {bid.status}")
        if event.status == EVENT_BOOKED:
            raise HTTPException(status_code=409, detail="Event is already booked")

        # Store updates expire loaded entities
        owner_id = event.owner_id
        caterer_id = bid.caterer_id
        amount = bid.amount
        event_title = event.title

        try:
            self.repo.set_status(self.store, bid_id, BID_ACCEPTED)
            logger.info(f"✅ Bid {bid_id} accepted for event {event_id}")

            EventRepository.set_status(self.store, event_id, EVENT_BOOKED)
            logger.info(f"📅 Event {event_id} booked")

            sibling_ids = [b.id for b in self.repo.get_pending_bids(self.store, event_id)]
            for sibling_id in sibling_ids:
                self.repo.set_status(self.store, sibling_id, BID_REJECTED)
            if sibling_ids:
                logger.info(f"🚫 Rejected {len(sibling_ids)} other bid(s) on event {event_id}: {sibling_ids}")

            chat, created = ChatRepository.get_or_create_chat(self.store, event_id, owner_id, caterer_id)
        except StoreError as e:
            logger.error(f"❌ Accepting bid {bid_id} on event {event_id} failed: {e}")
            event_state, bids_state = self._resync(event_id)
            raise HTTPException(
                status_code=500,
                detail={"message": str(e), "event": event_state, "bids": bids_state},
            ) from e

        if not created:
            logger.info(f"💬 Reusing chat {chat.id} for event {event_id}")
        chat_id = chat.id

        caterer_email = self._email_for(caterer_id)
        if caterer_email:
            background_tasks.add_task(
                send_bid_accepted_email,
                self.sender,
                to=caterer_email,
                chat_id=chat_id,
                event_title=event_title,
                amount=amount,
            )
        else:
            logger.info(f"📭 Caterer {caterer_id} has no email, skipping acceptance email")

        return AcceptBidResponse(
            chat_id=chat_id,
            redirect_to=f"/chats/{chat_id}",
            bid=BidResponse.model_validate(self.repo.get_bid(self.store, bid_id)),
            event=EventResponse.model_validate(EventRepository.get_event(self.store, event_id)),
        )

    def _resync(self, event_id: int) -> tuple[Optional[dict], list[dict]]:
        """Best-effort re-read of an event and its bids after a failed write"""
        event_state = None
        bids_state = []
        try:
            event = EventRepository.get_event(self.store, event_id)
            if event:
                event_state = EventResponse.model_validate(event).model_dump(mode="json")
            bids_state = [
                BidResponse.model_validate(b).model_dump(mode="json")
                for b in self.repo.get_event_bids(self.store, event_id)
            ]
        except Exception as e:
            logger.warning(f"⚠️ Re-reading event {event_id} after failure also failed: {e}")
        return event_state, bids_state

    def reject_bid(self, ctx: AuthContext, event_id: int, bid_id: int) -> list[EventBidResponse]:
        """Reject a single bid; nothing else on the event changes"""
        self._get_owned_event(ctx, event_id)
        bid = self._get_event_bid(event_id, bid_id)
        if bid.status != BID_SENT:
            raise HTTPException(status_code=409, detail=f"Bid is already {bid.status}")

        try:
            self.repo.set_status(self.store, bid_id, BID_REJECTED)
        except StoreError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e

        logger.info(f"🚫 Bid {bid_id} rejected on event {event_id}")
        return self._event_bids(event_id)

    # ------------------------------------------------------------------ #
    # Listings
    # ------------------------------------------------------------------ #

    def _event_bids(self, event_id: int) -> list[EventBidResponse]:
        # caterer summary is read from the Bid.caterer relationship
        return [EventBidResponse.model_validate(b) for b in self.repo.get_event_bids(self.store, event_id)]

    def list_event_bids(self, ctx: AuthContext, event_id: int) -> list[EventBidResponse]:
        """Bids on one of the caller's events, in the order they were placed"""
        self._get_owned_event(ctx, event_id)
        return self._event_bids(event_id)

    def list_my_bids(self, ctx: AuthContext) -> list[MyBidResponse]:
        responses = []
        for bid in self.repo.get_caterer_bids(self.store, ctx.caller_id):
            response = MyBidResponse.model_validate(bid)
            if bid.event:
                response.event_title = bid.event.title
                response.event_status = bid.event.status
            responses.append(response)
        return responses
