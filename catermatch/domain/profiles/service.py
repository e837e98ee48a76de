"""Profile service - Sign-up, profile edits, logos and portfolios"""

import logging
import os
import uuid

from fastapi import HTTPException

from ...auth import AuthContext
from ...models import ROLE_CATERER, ROLE_OWNER, User
from ...storage import PORTFOLIO_BUCKET, PROFILES_BUCKET, FileAssetClient, FilePayload, StorageError
from ...store import EntityStore, StoreError
from .repository import UserRepository
from .schemas import PortfolioItem, ProfileUpdate, SignupRequest

logger = logging.getLogger(__name__)

CONTENT_TYPE_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/heic": "heic",
    "image/avif": "avif",
}


class ProfileService:
    """Service layer for profile business logic"""

    def __init__(self, store: EntityStore, assets: FileAssetClient):
        self.store = store
        self.assets = assets
        self.repo = UserRepository()

    def _get_me(self, ctx: AuthContext) -> User:
        user = self.repo.get_user(self.store, ctx.caller_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def signup(self, claims: dict, data: SignupRequest) -> User:
        """Create the profile row for a verified identity"""
        uid = claims["uid"]
        email = claims.get("email")

        if self.repo.get_by_firebase_uid(self.store, uid):
            raise HTTPException(status_code=409, detail="This account already has a profile")
        if email and self.repo.get_by_email(self.store, email):
            raise HTTPException(status_code=409, detail="An account with this email already exists")

        try:
            user = self.repo.create_user(
                self.store,
                firebase_uid=uid,
                email=email,
                role=data.role,
                display_name=data.display_name,
                specialties=[],
            )
        except StoreError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e

        logger.info(f"✅ New {user.role} signed up: {user.id} ({email})")
        return user

    def get_me(self, ctx: AuthContext) -> User:
        return self._get_me(ctx)

    def update_me(self, ctx: AuthContext, data: ProfileUpdate) -> User:
        """Apply the fields that were sent; returns the re-read profile"""
        patch = data.model_dump(exclude_unset=True)
        if patch:
            try:
                self.repo.update_user(self.store, ctx.caller_id, patch)
            except StoreError as e:
                raise HTTPException(status_code=500, detail=str(e)) from e
            logger.info(f"✏️ Profile {ctx.caller_id} updated: {sorted(patch)}")
        return self._get_me(ctx)

    def upload_logo(self, ctx: AuthContext, file: FilePayload) -> User:
        ext = os.path.splitext(file.filename)[1].lstrip(".").lower()
        if not ext:
            ext = CONTENT_TYPE_EXTENSIONS.get(file.content_type, "png")
        path = f"{ctx.caller_id}/{uuid.uuid4()}.{ext}"

        try:
            self.assets.upload(PROFILES_BUCKET, path, file.data, file.content_type)
            logo_url = self.assets.public_url(PROFILES_BUCKET, path)
        except StorageError as e:
            raise HTTPException(status_code=500, detail=f"Upload failed: {e}") from e

        try:
            self.repo.update_user(self.store, ctx.caller_id, {"logo_url": logo_url})
        except StoreError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e

        logger.info(f"🖼️ Logo updated for user {ctx.caller_id}")
        return self._get_me(ctx)

    # ------------------------------------------------------------------ #
    # Portfolio
    # ------------------------------------------------------------------ #

    def list_portfolio(self, caterer_id: int) -> list[PortfolioItem]:
        """Portfolio images stored under the caterer's id prefix"""
        self.get_caterer(caterer_id)
        try:
            entries = self.assets.list_files(PORTFOLIO_BUCKET, prefix=f"{caterer_id}/", limit=100)
            return [
                PortfolioItem(name=entry["name"], url=self.assets.public_url(PORTFOLIO_BUCKET, entry["name"]))
                for entry in entries
            ]
        except StorageError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e

    def add_portfolio_item(self, ctx: AuthContext, file: FilePayload) -> list[PortfolioItem]:
        if ctx.caller_role != ROLE_CATERER:
            raise HTTPException(status_code=403, detail="Only caterers have a portfolio")

        path = f"{ctx.caller_id}/{uuid.uuid4()}-{file.filename}"
        try:
            self.assets.upload(PORTFOLIO_BUCKET, path, file.data, file.content_type)
        except StorageError as e:
            raise HTTPException(status_code=500, detail=f"Upload failed: {e}") from e
        return self.list_portfolio(ctx.caller_id)

    def remove_portfolio_item(self, ctx: AuthContext, name: str) -> list[PortfolioItem]:
        """Remove one item; only keys under the caller's own prefix are accepted"""
        if ctx.caller_role != ROLE_CATERER:
            raise HTTPException(status_code=403, detail="Only caterers have a portfolio")

        prefix = f"{ctx.caller_id}/"
        key = name if "/" in name else f"{prefix}{name}"
        if ".." in key or "\\" in key:
            raise HTTPException(status_code=400, detail="Invalid portfolio item name")
        if not key.startswith(prefix) or key == prefix:
            raise HTTPException(status_code=403, detail="You can only remove your own portfolio items")

        try:
            self.assets.remove(PORTFOLIO_BUCKET, [key])
        except StorageError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e
        return self.list_portfolio(ctx.caller_id)

    # ------------------------------------------------------------------ #
    # Public profiles
    # ------------------------------------------------------------------ #

    def get_caterer(self, caterer_id: int) -> User:
        user = self.repo.get_user(self.store, caterer_id)
        if not user or user.role != ROLE_CATERER:
            raise HTTPException(status_code=404, detail="Caterer not found")
        return user

    def get_owner(self, owner_id: int) -> User:
        user = self.repo.get_user(self.store, owner_id)
        if not user or user.role != ROLE_OWNER:
            raise HTTPException(status_code=404, detail="Owner not found")
        return user
