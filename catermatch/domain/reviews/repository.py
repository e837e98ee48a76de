"""Review repository - Database operations for reviews"""

from typing import Optional

from ...models import BID_ACCEPTED, Bid, Review
from ...store import EntityStore


class ReviewRepository:
    """Repository for review database operations"""

    @staticmethod
    def get_accepted_bid(store: EntityStore, event_id: int) -> Optional[Bid]:
        return store.get("bids", {"event_id": event_id, "status": BID_ACCEPTED})

    @staticmethod
    def get_review(store: EntityStore, event_id: int, owner_id: int, caterer_id: int) -> Optional[Review]:
        return store.get(
            "reviews", {"event_id": event_id, "owner_id": owner_id, "caterer_id": caterer_id}
        )

    @staticmethod
    def create_review(
        store: EntityStore, event_id: int, owner_id: int, caterer_id: int, rating: int, comment: Optional[str]
    ) -> Review:
        return store.insert(
            "reviews",
            {
                "event_id": event_id,
                "owner_id": owner_id,
                "caterer_id": caterer_id,
                "rating": rating,
                "comment": comment,
            },
        )

    @staticmethod
    def update_review(store: EntityStore, review_id: int, rating: int, comment: Optional[str]) -> int:
        return store.update("reviews", {"id": review_id}, {"rating": rating, "comment": comment})

    @staticmethod
    def get_caterer_reviews(store: EntityStore, caterer_id: int) -> list[Review]:
        """All reviews of a caterer, newest first"""
        return store.query("reviews", {"caterer_id": caterer_id}, order=["-created_at"])
