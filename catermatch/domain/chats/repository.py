"""Chat repository - Database operations for chats and messages"""

import logging
from typing import Optional

from sqlalchemy import or_

from ...models import Chat, Message
from ...store import EntityStore

logger = logging.getLogger(__name__)


class ChatRepository:
    """Repository for chat database operations"""

    @staticmethod
    def get_chat(store: EntityStore, chat_id: int) -> Optional[Chat]:
        return store.get("chats", {"id": chat_id})

    @staticmethod
    def find_chat(store: EntityStore, event_id: int, owner_id: int, caterer_id: int) -> Optional[Chat]:
        return store.get(
            "chats", {"event_id": event_id, "owner_id": owner_id, "caterer_id": caterer_id}
        )

    @staticmethod
    def get_or_create_chat(
        store: EntityStore, event_id: int, owner_id: int, caterer_id: int
    ) -> tuple[Chat, bool]:
        """
        Return the chat for (event, owner, caterer), creating it when absent.

        Lookup-then-insert without a unique constraint: two concurrent callers
        can both miss the lookup and insert a chat each.

        Returns (chat, created)
        """
        existing = ChatRepository.find_chat(store, event_id, owner_id, caterer_id)
        if existing:
            return existing, False

        chat = store.insert(
            "chats", {"event_id": event_id, "owner_id": owner_id, "caterer_id": caterer_id}
        )
        logger.info(f"💬 Created chat {chat.id} for event {event_id} (owner {owner_id}, caterer {caterer_id})")
        return chat, True

    @staticmethod
    def get_user_chats(store: EntityStore, user_id: int) -> list[Chat]:
        """Chats where the user is owner or caterer, newest first"""
        return (
            store.db.query(Chat)
            .filter(or_(Chat.owner_id == user_id, Chat.caterer_id == user_id))
            .order_by(Chat.created_at.desc(), Chat.id.desc())
            .all()
        )

    @staticmethod
    def get_messages(store: EntityStore, chat_id: int) -> list[Message]:
        return store.query("messages", {"chat_id": chat_id}, order=["created_at"])

    @staticmethod
    def create_message(store: EntityStore, chat_id: int, sender_id: int, text: Optional[str], file: Optional[dict]) -> Message:
        return store.insert(
            "messages", {"chat_id": chat_id, "sender_id": sender_id, "text": text, "file": file}
        )
