"""Review service - Owners reviewing the caterer they booked"""

import logging
from typing import Any, Optional

from fastapi import HTTPException

from ...auth import AuthContext
from ...models import ROLE_CATERER, Event, Review
from ...shared.validators import validate_rating
from ...store import EntityStore, StoreError
from ...utils.sanitization import clean_text
from ..events.repository import EventRepository
from .repository import ReviewRepository
from .schemas import CatererReviewsResponse, ReviewResponse

logger = logging.getLogger(__name__)


def _to_response(review: Review) -> ReviewResponse:
    response = ReviewResponse.model_validate(review)
    if review.owner:
        response.owner_name = review.owner.display_name
    return response


class ReviewService:
    """Service layer for review business logic"""

    def __init__(self, store: EntityStore):
        self.store = store
        self.repo = ReviewRepository()

    def _get_owned_event(self, ctx: AuthContext, event_id: int) -> Event:
        event = EventRepository.get_event(self.store, event_id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        if event.owner_id != ctx.caller_id:
            raise HTTPException(status_code=403, detail="Only the event owner can review this event")
        return event

    def place_review(self, ctx: AuthContext, event_id: int, rating: Any, comment: Optional[str]) -> ReviewResponse:
        """
        Review the accepted caterer of an event.

        One review per (event, owner, caterer): a second call rewrites the
        rating and comment of the existing one.
        """
        self._get_owned_event(ctx, event_id)

        accepted = self.repo.get_accepted_bid(self.store, event_id)
        if not accepted:
            raise HTTPException(status_code=409, detail="No accepted bid for this event")

        try:
            rating = validate_rating(rating)
            comment = clean_text(comment)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        caterer_id = accepted.caterer_id
        try:
            existing = self.repo.get_review(self.store, event_id, ctx.caller_id, caterer_id)
            if existing:
                review_id = existing.id
                self.repo.update_review(self.store, review_id, rating, comment)
                logger.info(f"✏️ Review {review_id} updated for event {event_id} (rating {rating})")
            else:
                review_id = self.repo.create_review(
                    self.store, event_id, ctx.caller_id, caterer_id, rating, comment
                ).id
                logger.info(f"⭐ Review {review_id} placed for caterer {caterer_id} on event {event_id} (rating {rating})")
            review = self.store.get("reviews", {"id": review_id})
        except StoreError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e

        return _to_response(review)

    def get_my_review(self, ctx: AuthContext, event_id: int) -> Optional[ReviewResponse]:
        """The caller's review of the booked caterer, if any"""
        self._get_owned_event(ctx, event_id)
        accepted = self.repo.get_accepted_bid(self.store, event_id)
        if not accepted:
            return None
        review = self.repo.get_review(self.store, event_id, ctx.caller_id, accepted.caterer_id)
        return _to_response(review) if review else None

    def list_caterer_reviews(self, caterer_id: int) -> CatererReviewsResponse:
        caterer = self.store.get("users", {"id": caterer_id})
        if not caterer or caterer.role != ROLE_CATERER:
            raise HTTPException(status_code=404, detail="Caterer not found")

        reviews = [_to_response(r) for r in self.repo.get_caterer_reviews(self.store, caterer_id)]
        average = round(sum(r.rating for r in reviews) / len(reviews), 2) if reviews else None
        return CatererReviewsResponse(
            caterer_id=caterer_id,
            average_rating=average,
            count=len(reviews),
            reviews=reviews,
        )
