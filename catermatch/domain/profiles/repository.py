"""User repository - Database operations for profiles"""

from typing import Optional

from ...models import User
from ...store import EntityStore


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_user(store: EntityStore, user_id: int) -> Optional[User]:
        return store.get("users", {"id": user_id})

    @staticmethod
    def get_by_firebase_uid(store: EntityStore, firebase_uid: str) -> Optional[User]:
        return store.get("users", {"firebase_uid": firebase_uid})

    @staticmethod
    def get_by_email(store: EntityStore, email: str) -> Optional[User]:
        return store.get("users", {"email": email})

    @staticmethod
    def create_user(store: EntityStore, **user_data) -> User:
        return store.insert("users", user_data)

    @staticmethod
    def update_user(store: EntityStore, user_id: int, patch: dict) -> int:
        return store.update("users", {"id": user_id}, patch)
