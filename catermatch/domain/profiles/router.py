"""Profile router - FastAPI endpoints for accounts and public profiles"""

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ...auth import AuthContext, get_auth_context, get_token_claims
from ...database import get_db
from ...shared.uploads import read_upload
from ...storage import FileAssetClient, get_file_assets
from ...store import EntityStore
from .schemas import (
    CatererProfileResponse,
    OwnerProfileResponse,
    PortfolioItem,
    ProfileUpdate,
    SignupRequest,
    UserResponse,
)
from .service import ProfileService

router = APIRouter(tags=["Profiles"])


def get_profile_service(
    db: Session = Depends(get_db),
    assets: FileAssetClient = Depends(get_file_assets),
) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(EntityStore(db), assets)


def _first_error(e: ValidationError) -> str:
    error = e.errors()[0]
    field = ".".join(str(p) for p in error.get("loc", ()))
    return f"{field}: {error['msg']}" if field else error["msg"]


@router.post("/users/signup", response_model=UserResponse)
async def signup(
    payload: dict = Body(...),
    claims: dict = Depends(get_token_claims),
    service: ProfileService = Depends(get_profile_service),
):
    """Create the profile for the signed-in Firebase account"""
    try:
        data = SignupRequest(**payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_first_error(e)) from e
    return service.signup(claims, data)


@router.get("/users/me", response_model=UserResponse)
async def get_me(
    ctx: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    return service.get_me(ctx)


@router.patch("/users/me", response_model=UserResponse)
async def update_me(
    payload: dict = Body(...),
    ctx: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    try:
        data = ProfileUpdate(**payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_first_error(e)) from e
    return service.update_me(ctx, data)


@router.post("/users/me/logo", response_model=UserResponse)
async def upload_logo(
    file: UploadFile = File(...),
    ctx: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    payload = await read_upload(file)
    return service.upload_logo(ctx, payload)


@router.post("/users/me/portfolio", response_model=list[PortfolioItem])
async def add_portfolio_item(
    file: UploadFile = File(...),
    ctx: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    """Upload a portfolio image; returns the refreshed portfolio"""
    payload = await read_upload(file)
    return service.add_portfolio_item(ctx, payload)


@router.delete("/users/me/portfolio/{name:path}", response_model=list[PortfolioItem])
async def remove_portfolio_item(
    name: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    return service.remove_portfolio_item(ctx, name)


@router.get("/caterers/{caterer_id}", response_model=CatererProfileResponse)
async def get_caterer_profile(
    caterer_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    return service.get_caterer(caterer_id)


@router.get("/caterers/{caterer_id}/portfolio", response_model=list[PortfolioItem])
async def list_portfolio(
    caterer_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    return service.list_portfolio(caterer_id)


@router.get("/owners/{owner_id}", response_model=OwnerProfileResponse)
async def get_owner_profile(
    owner_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    return service.get_owner(owner_id)
