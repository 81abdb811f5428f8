from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase
from app.modules.favorites.schemas import FavoriteCreate, FavoriteUpdate, FavoriteResult, FavoriteListResult
from app.modules.favorites.service import FavoriteService
from app.core.dependencies import get_request_user_id
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/favorites", tags=["favorites"])


def get_favorite_service(supabase: Client = Depends(get_supabase)) -> FavoriteService:
    return FavoriteService(supabase)


@router.get("", response_model=FavoriteListResult)
async def list_favorites(
    user_id: str = Depends(get_request_user_id),
    service: FavoriteService = Depends(get_favorite_service)
):
    """List the user's favorites"""
    return FavoriteListResult(favorites=service.list_favorites(user_id))


@router.post("", response_model=FavoriteResult, status_code=201)
async def add_favorite(
    favorite_data: FavoriteCreate,
    user_id: str = Depends(get_request_user_id),
    service: FavoriteService = Depends(get_favorite_service)
):
    """Add (or overwrite) a favorite"""
    return FavoriteResult(favorite=service.add_favorite(favorite_data, user_id))


@router.put("", response_model=FavoriteResult)
async def update_favorite(
    favorite_data: FavoriteUpdate,
    user_id: str = Depends(get_request_user_id),
    service: FavoriteService = Depends(get_favorite_service)
):
    """Update rating or notes of a favorite"""
    return FavoriteResult(favorite=service.update_favorite(favorite_data, user_id))


@router.delete("")
async def remove_favorite(
    recipe_name: Optional[str] = None,
    recipe_type: str = "builtin",
    user_id: str = Depends(get_request_user_id),
    service: FavoriteService = Depends(get_favorite_service)
):
    """Remove a favorite"""
    if not recipe_name:
        raise HTTPException(status_code=400, detail="Recipe name is required")
    service.remove_favorite(recipe_name, recipe_type, user_id)
    return {"success": True}
