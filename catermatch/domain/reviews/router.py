"""Review router - FastAPI endpoints for event reviews"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import AuthContext, get_auth_context
from ...database import get_db
from ...store import EntityStore
from .schemas import CatererReviewsResponse, ReviewResponse, ReviewUpsert
from .service import ReviewService

router = APIRouter(tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(EntityStore(db))


@router.put("/events/{event_id}/review", response_model=ReviewResponse)
async def place_review(
    event_id: int,
    data: ReviewUpsert,
    ctx: AuthContext = Depends(get_auth_context),
    service: ReviewService = Depends(get_review_service),
):
    """Place or update the review of the booked caterer"""
    return service.place_review(ctx, event_id, data.rating, data.comment)


@router.get("/events/{event_id}/review", response_model=Optional[ReviewResponse])
async def get_my_review(
    event_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: ReviewService = Depends(get_review_service),
):
    return service.get_my_review(ctx, event_id)


@router.get("/caterers/{caterer_id}/reviews", response_model=CatererReviewsResponse)
async def list_caterer_reviews(
    caterer_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: ReviewService = Depends(get_review_service),
):
    """All reviews of a caterer with the average rating"""
    return service.list_caterer_reviews(caterer_id)
