"""Chat router - FastAPI endpoints for chat threads"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from ...auth import AuthContext, get_auth_context
from ...database import get_db
from ...shared.uploads import read_upload
from ...storage import MAX_ATTACHMENT_SIZE, FileAssetClient, get_file_assets
from ...store import EntityStore
from .schemas import ChatResponse, MessageResponse
from .service import ChatService

router = APIRouter(prefix="/chats", tags=["Chats"])


def get_chat_service(
    db: Session = Depends(get_db),
    assets: FileAssetClient = Depends(get_file_assets),
) -> ChatService:
    """Dependency injection for ChatService"""
    return ChatService(EntityStore(db), assets)


@router.get("", response_model=list[ChatResponse])
async def list_my_chats(
    ctx: AuthContext = Depends(get_auth_context),
    service: ChatService = Depends(get_chat_service),
):
    return service.list_my_chats(ctx)


@router.get("/{chat_id}", response_model=ChatResponse)
async def get_chat(
    chat_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: ChatService = Depends(get_chat_service),
):
    chat = service.get_chat(ctx, chat_id)
    return ChatResponse(
        id=chat.id,
        event_id=chat.event_id,
        owner_id=chat.owner_id,
        caterer_id=chat.caterer_id,
        created_at=chat.created_at,
        event_title=chat.event.title if chat.event else None,
    )


@router.get("/{chat_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    chat_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: ChatService = Depends(get_chat_service),
):
    """Messages with freshly signed attachment URLs"""
    return service.list_messages(ctx, chat_id)


@router.post("/{chat_id}/messages", response_model=list[MessageResponse])
async def send_message(
    chat_id: int,
    text: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    ctx: AuthContext = Depends(get_auth_context),
    service: ChatService = Depends(get_chat_service),
):
    """Send text and/or a file; returns the reloaded thread"""
    payload = None
    if file is not None and file.filename:
        payload = await read_upload(file, allowed_types=None, max_size=MAX_ATTACHMENT_SIZE)
    return service.send_message(ctx, chat_id, text, payload)
