"""Event router - FastAPI endpoints for event operations"""

import logging
from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ...auth import AuthContext, get_auth_context
from ...database import get_db
from ...shared.uploads import read_upload
from ...storage import FileAssetClient, get_file_assets
from ...store import EntityStore
from .schemas import EventCreate, EventResponse, OpenEventFilters
from .service import EventService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["Events"])

MAX_EVENT_PHOTOS = 10


def get_event_service(
    db: Session = Depends(get_db),
    assets: FileAssetClient = Depends(get_file_assets),
) -> EventService:
    """Dependency injection for EventService"""
    return EventService(EntityStore(db), assets)


@router.post("", response_model=EventResponse)
async def create_event(
    title: str = Form(...),
    description: Optional[str] = Form(None),
    date: Optional[datetime] = Form(None),
    guests: Optional[int] = Form(None),
    city: Optional[str] = Form(None),
    budget: Optional[float] = Form(None),
    address: Optional[str] = Form(None),
    photos: list[UploadFile] = File(default=[]),
    ctx: AuthContext = Depends(get_auth_context),
    service: EventService = Depends(get_event_service),
):
    """Post a new event (owners only)"""
    try:
        data = EventCreate(
            title=title,
            description=description,
            date=date,
            guests=guests,
            city=city,
            budget=budget,
            address=address,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.errors()[0]["msg"]) from e

    if len(photos) > MAX_EVENT_PHOTOS:
        raise HTTPException(status_code=400, detail=f"At most {MAX_EVENT_PHOTOS} photos per event")

    payloads = [await read_upload(photo) for photo in photos]
    return service.create_event(ctx, data, payloads)


@router.get("/open", response_model=list[EventResponse])
async def list_open_events(
    city: Optional[str] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    min_guests: Optional[int] = Query(None),
    max_guests: Optional[int] = Query(None),
    sort: Literal["soonest", "newest", "oldest"] = Query("soonest"),
    ctx: AuthContext = Depends(get_auth_context),
    service: EventService = Depends(get_event_service),
):
    """Browse events that still accept bids"""
    filters = OpenEventFilters(
        city=city,
        date_from=date_from,
        date_to=date_to,
        min_guests=min_guests,
        max_guests=max_guests,
        sort=sort,
    )
    return service.list_open_events(filters)


@router.get("/mine", response_model=list[EventResponse])
async def list_my_events(
    ctx: AuthContext = Depends(get_auth_context),
    service: EventService = Depends(get_event_service),
):
    """Events posted by the current owner, newest first"""
    return service.list_my_events(ctx)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: EventService = Depends(get_event_service),
):
    return service.get_event(event_id)
