"""Chat domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ChatResponse(BaseModel):
    """Schema for chat response"""

    id: int
    event_id: int
    owner_id: int
    caterer_id: int
    created_at: Optional[datetime] = None
    event_title: Optional[str] = None

    class Config:
        from_attributes = True


class MessageFile(BaseModel):
    """Attachment metadata stored on a message"""

    name: str
    path: str
    type: Optional[str] = None
    size: Optional[int] = None
    signed_url: Optional[str] = None


class MessageResponse(BaseModel):
    """Schema for message response"""

    id: int
    chat_id: int
    sender_id: int
    text: Optional[str] = None
    file: Optional[MessageFile] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
