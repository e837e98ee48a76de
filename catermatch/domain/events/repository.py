"""Event repository - Database operations for events"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ...models import EVENT_OPEN, Event
from ...store import EntityStore, StoreError
from .schemas import OpenEventFilters


class EventRepository:
    """Repository for event database operations"""

    @staticmethod
    def get_event(store: EntityStore, event_id: int) -> Optional[Event]:
        return store.get("events", {"id": event_id})

    @staticmethod
    def create_event(store: EntityStore, owner_id: int, **event_data) -> Event:
        return store.insert("events", {"owner_id": owner_id, "status": EVENT_OPEN, **event_data})

    @staticmethod
    def set_status(store: EntityStore, event_id: int, status: str) -> int:
        return store.update("events", {"id": event_id}, {"status": status})

    @staticmethod
    def get_owner_events(store: EntityStore, owner_id: int) -> list[Event]:
        """All events posted by an owner, newest first"""
        return store.query("events", {"owner_id": owner_id}, order=["-created_at"])

    @staticmethod
    def search_open_events(store: EntityStore, filters: OpenEventFilters) -> list[Event]:
        """Open events matching the browse filters"""
        query = store.db.query(Event).filter(Event.status == EVENT_OPEN)

        city = (filters.city or "").strip()
        if city:
            query = query.filter(Event.city.ilike(f"%{city}%"))
        if filters.date_from:
            query = query.filter(Event.date >= filters.date_from)
        if filters.date_to:
            query = query.filter(Event.date <= filters.date_to)
        if filters.min_guests is not None:
            query = query.filter(Event.guests >= filters.min_guests)
        if filters.max_guests is not None:
            query = query.filter(Event.guests <= filters.max_guests)

        if filters.sort == "newest":
            query = query.order_by(Event.created_at.desc(), Event.id.desc())
        elif filters.sort == "oldest":
            query = query.order_by(Event.created_at.asc(), Event.id.asc())
        else:
            # soonest first, undated events last
            query = query.order_by(Event.date.is_(None), Event.date.asc(), Event.id.asc())

        try:
            return query.all()
        except SQLAlchemyError as e:
            store.db.rollback()
            raise StoreError(f"Failed to query events: {e}") from e
