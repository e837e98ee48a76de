from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# User roles
ROLE_OWNER = "owner"
ROLE_CATERER = "caterer"
USER_ROLES = (ROLE_OWNER, ROLE_CATERER)

# Event status: open -> booked (terminal)
EVENT_OPEN = "open"
EVENT_BOOKED = "booked"

# Bid status: sent -> accepted | rejected (both terminal)
BID_SENT = "sent"
BID_ACCEPTED = "accepted"
BID_REJECTED = "rejected"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)
    role = Column(String(20), nullable=False)  # owner, caterer
    display_name = Column(String(255), nullable=True)
    company_name = Column(String(255), nullable=True)  # caterer
    bio = Column(Text, nullable=True)
    specialties = Column(JSON, default=list, nullable=True)  # caterer, e.g. ["BBQ", "vegan"]
    logo_url = Column(String(500), nullable=True)  # public URL in the profiles bucket
    city = Column(String(255), nullable=True)
    website = Column(String(500), nullable=True)
    min_price = Column(Integer, nullable=True)  # caterer, whole euros
    price_note = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    events = relationship("Event", back_populates="owner")
    bids = relationship("Bid", back_populates="caterer")


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), nullable=True)
    guests = Column(Integer, nullable=True)
    city = Column(String(255), nullable=True)
    budget = Column(Float, nullable=True)
    address = Column(String(500), nullable=True)
    photos = Column(JSON, default=list, nullable=True)  # ordered public URLs
    status = Column(String(20), default=EVENT_OPEN, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User", back_populates="events")
    bids = relationship("Bid", back_populates="event", order_by="Bid.id")


class Bid(Base):
    __tablename__ = "bids"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    caterer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    message = Column(Text, nullable=True)
    status = Column(String(20), default=BID_SENT, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="bids")
    caterer = relationship("User", back_populates="bids")


class Chat(Base):
    """One thread per (event, owner, caterer) triple.

    The triple carries no unique constraint; the bid workflow looks up an
    existing chat before inserting one.
    """

    __tablename__ = "chats"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    caterer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event")


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    chat_id = Column(Integer, ForeignKey("chats.id"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    text = Column(Text, nullable=True)
    file = Column(JSON, nullable=True)  # {name, path, type, size}
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    caterer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1-5
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", foreign_keys=[owner_id])
