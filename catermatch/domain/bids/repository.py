"""Bid repository - Database operations for bids"""

from typing import Optional

from ...models import BID_SENT, Bid
from ...store import EntityStore


class BidRepository:
    """Repository for bid database operations"""

    @staticmethod
    def get_bid(store: EntityStore, bid_id: int) -> Optional[Bid]:
        return store.get("bids", {"id": bid_id})

    @staticmethod
    def create_bid(
        store: EntityStore, event_id: int, caterer_id: int, amount: float, message: Optional[str]
    ) -> Bid:
        return store.insert(
            "bids",
            {
                "event_id": event_id,
                "caterer_id": caterer_id,
                "amount": amount,
                "message": message,
                "status": BID_SENT,
            },
        )

    @staticmethod
    def set_status(store: EntityStore, bid_id: int, status: str) -> int:
        return store.update("bids", {"id": bid_id}, {"status": status})

    @staticmethod
    def get_event_bids(store: EntityStore, event_id: int) -> list[Bid]:
        """All bids on an event in the order they were placed"""
        return store.query("bids", {"event_id": event_id}, order=["created_at"])

    @staticmethod
    def get_pending_bids(store: EntityStore, event_id: int) -> list[Bid]:
        return store.query("bids", {"event_id": event_id, "status": BID_SENT}, order=["created_at"])

    @staticmethod
    def get_caterer_bids(store: EntityStore, caterer_id: int) -> list[Bid]:
        """A caterer's bids, newest first"""
        return store.query("bids", {"caterer_id": caterer_id}, order=["-created_at"])
