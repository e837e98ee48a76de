"""
Entity store client.

Thin typed accessor over the relational store. Every collection maps to one
SQLAlchemy model; field names are checked against the model's columns before
anything reaches the database. Each write commits on its own; a failed
statement rolls the session back and surfaces as ``StoreError``. Nothing here
retries.
"""

import logging
from typing import Any, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import Bid, Chat, Event, Message, Review, User

logger = logging.getLogger(__name__)

COLLECTIONS = {
    "users": User,
    "events": Event,
    "bids": Bid,
    "chats": Chat,
    "messages": Message,
    "reviews": Review,
}


class StoreError(Exception):
    """Transport, constraint or contract failure of an entity store call"""


class EntityStore:
    """insert / update / get / query against named collections"""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------ #
    # Boundary validation
    # ------------------------------------------------------------------ #

    @staticmethod
    def model_for(collection: str):
        model = COLLECTIONS.get(collection)
        if model is None:
            raise StoreError(f"Unknown collection: {collection}")
        return model

    @staticmethod
    def _check_fields(model, fields: Iterable[str]) -> None:
        columns = model.__table__.columns.keys()
        unknown = [f for f in fields if f not in columns]
        if unknown:
            raise StoreError(f"Unknown field(s) for {model.__tablename__}: {', '.join(unknown)}")

    def _filtered(self, model, filters: Optional[dict[str, Any]]):
        filters = filters or {}
        self._check_fields(model, filters.keys())
        query = self.db.query(model)
        for key, value in filters.items():
            column = getattr(model, key)
            query = query.filter(column.is_(None) if value is None else column == value)
        return query

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def insert(self, collection: str, record: dict[str, Any]):
        """Insert one record and return the refreshed entity"""
        model = self.model_for(collection)
        self._check_fields(model, record.keys())
        entity = model(**record)
        try:
            self.db.add(entity)
            self.db.commit()
            self.db.refresh(entity)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Insert into {collection} failed: {e}")
            raise StoreError(f"Failed to insert into {collection}: {e}") from e
        return entity

    def update(self, collection: str, filters: dict[str, Any], patch: dict[str, Any]) -> int:
        """Apply ``patch`` to every row matching ``filters``; returns the row count"""
        model = self.model_for(collection)
        if not filters:
            raise StoreError(f"Refusing unfiltered update of {collection}")
        self._check_fields(model, patch.keys())
        try:
            count = self._filtered(model, filters).update(patch, synchronize_session="fetch")
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Update of {collection} {filters} failed: {e}")
            raise StoreError(f"Failed to update {collection}: {e}") from e
        # Entities already loaded in this session must reflect the new row state
        self.db.expire_all()
        return count

    def get(self, collection: str, filters: dict[str, Any]):
        """Return the first entity matching ``filters`` or None"""
        model = self.model_for(collection)
        try:
            return self._filtered(model, filters).order_by(model.id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to read {collection}: {e}") from e

    def query(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
        order: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
    ) -> list:
        """
        Return all entities matching ``filters``.

        ``order`` is a sequence of column names, ``-`` prefix for descending.
        The primary key breaks ties in the same direction as the first key.
        """
        model = self.model_for(collection)
        order = list(order or [])
        self._check_fields(model, [o.lstrip("-") for o in order])
        query = self._filtered(model, filters)
        for key in order:
            column = getattr(model, key.lstrip("-"))
            query = query.order_by(column.desc() if key.startswith("-") else column.asc())
        descending = bool(order) and order[0].startswith("-")
        query = query.order_by(model.id.desc() if descending else model.id.asc())
        if limit:
            query = query.limit(limit)
        try:
            return query.all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to query {collection}: {e}") from e
