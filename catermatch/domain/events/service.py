"""Event service - Business logic for posting and browsing events"""

import logging
import uuid

from fastapi import HTTPException

from ...auth import AuthContext
from ...models import ROLE_OWNER, Event
from ...storage import EVENTS_BUCKET, FileAssetClient, FilePayload, StorageError
from ...store import EntityStore, StoreError
from .repository import EventRepository
from .schemas import EventCreate, OpenEventFilters

logger = logging.getLogger(__name__)


class EventService:
    """Service layer for event business logic"""

    def __init__(self, store: EntityStore, assets: FileAssetClient):
        self.store = store
        self.assets = assets
        self.repo = EventRepository()

    def get_event(self, event_id: int) -> Event:
        event = self.repo.get_event(self.store, event_id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    def create_event(self, ctx: AuthContext, data: EventCreate, photos: list[FilePayload]) -> Event:
        """Post a new open event; photos are uploaded first, in order"""
        if ctx.caller_role != ROLE_OWNER:
            raise HTTPException(status_code=403, detail="Only owners can post events")

        city = data.city
        if not city:
            owner = self.store.get("users", {"id": ctx.caller_id})
            city = owner.city if owner else None

        photo_urls = []
        for photo in photos:
            path = f"{uuid.uuid4()}-{photo.filename}"
            try:
                self.assets.upload(EVENTS_BUCKET, path, photo.data, photo.content_type)
            except StorageError as e:
                raise HTTPException(status_code=500, detail=f"Upload failed: {e}") from e
            photo_urls.append(self.assets.public_url(EVENTS_BUCKET, path))

        try:
            event = self.repo.create_event(
                self.store,
                ctx.caller_id,
                title=data.title,
                description=data.description,
                date=data.date,
                guests=data.guests,
                city=city,
                budget=data.budget,
                address=data.address,
                photos=photo_urls,
            )
        except StoreError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e

        logger.info(f"✅ Event {event.id} posted by owner {ctx.caller_id} ({len(photo_urls)} photo(s))")
        return event

    def list_open_events(self, filters: OpenEventFilters) -> list[Event]:
        try:
            return self.repo.search_open_events(self.store, filters)
        except StoreError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e

    def list_my_events(self, ctx: AuthContext) -> list[Event]:
        return self.repo.get_owner_events(self.store, ctx.caller_id)
