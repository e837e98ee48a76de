"""Chat service - Threads between an owner and the accepted caterer"""

import logging
import uuid
from typing import Optional

from fastapi import HTTPException

from ...auth import AuthContext
from ...config import CHAT_ATTACHMENT_URL_TTL
from ...models import Chat
from ...storage import CHATS_BUCKET, FileAssetClient, FilePayload, StorageError
from ...store import EntityStore, StoreError
from ...utils.sanitization import clean_text
from .repository import ChatRepository
from .schemas import ChatResponse, MessageFile, MessageResponse

logger = logging.getLogger(__name__)


class ChatService:
    """Service layer for chat business logic"""

    def __init__(self, store: EntityStore, assets: FileAssetClient):
        self.store = store
        self.assets = assets
        self.repo = ChatRepository()

    def get_chat(self, ctx: AuthContext, chat_id: int) -> Chat:
        """A chat the caller participates in"""
        chat = self.repo.get_chat(self.store, chat_id)
        if not chat:
            raise HTTPException(status_code=404, detail="Chat not found")
        if ctx.caller_id not in (chat.owner_id, chat.caterer_id):
            raise HTTPException(status_code=403, detail="You are not a participant in this chat")
        return chat

    def list_my_chats(self, ctx: AuthContext) -> list[ChatResponse]:
        chats = self.repo.get_user_chats(self.store, ctx.caller_id)
        return [
            ChatResponse(
                id=c.id,
                event_id=c.event_id,
                owner_id=c.owner_id,
                caterer_id=c.caterer_id,
                created_at=c.created_at,
                event_title=c.event.title if c.event else None,
            )
            for c in chats
        ]

    def list_messages(self, ctx: AuthContext, chat_id: int) -> list[MessageResponse]:
        """
        Messages in sending order. Attachment URLs are signed on every load
        and expire after CHAT_ATTACHMENT_URL_TTL seconds.
        """
        self.get_chat(ctx, chat_id)

        responses = []
        for message in self.repo.get_messages(self.store, chat_id):
            file = None
            if message.file and message.file.get("path"):
                file = MessageFile(**message.file)
                try:
                    file.signed_url = self.assets.signed_url(
                        CHATS_BUCKET, file.path, CHAT_ATTACHMENT_URL_TTL
                    )
                except StorageError as e:
                    logger.warning(f"⚠️ No signed URL for message {message.id} attachment: {e}")
            responses.append(
                MessageResponse(
                    id=message.id,
                    chat_id=message.chat_id,
                    sender_id=message.sender_id,
                    text=message.text,
                    file=file,
                    created_at=message.created_at,
                )
            )
        return responses

    def send_message(
        self,
        ctx: AuthContext,
        chat_id: int,
        text: Optional[str],
        file: Optional[FilePayload] = None,
    ) -> list[MessageResponse]:
        """Append a message, uploading the attachment first; returns the reloaded thread"""
        self.get_chat(ctx, chat_id)

        try:
            text = clean_text(text)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        if not text and not file:
            raise HTTPException(status_code=400, detail="A message needs text or a file")

        file_meta = None
        if file:
            path = f"{chat_id}/{uuid.uuid4()}-{file.filename}"
            try:
                self.assets.upload(CHATS_BUCKET, path, file.data, file.content_type)
            except StorageError as e:
                raise HTTPException(status_code=500, detail=f"Upload failed: {e}") from e
            file_meta = {
                "name": file.filename,
                "path": path,
                "type": file.content_type,
                "size": file.size,
            }

        try:
            self.repo.create_message(self.store, chat_id, ctx.caller_id, text, file_meta)
        except StoreError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e

        return self.list_messages(ctx, chat_id)
