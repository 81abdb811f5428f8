from supabase import Client
from app.modules.favorites.schemas import FavoriteCreate, FavoriteUpdate, FavoriteResponse
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

TABLE = "favorites"


class FavoriteService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_favorites(self, user_id: str) -> List[FavoriteResponse]:
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
            return [FavoriteResponse(**row) for row in (result.data or [])]
        except Exception as e:
            logger.error(f"Error fetching favorites: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch favorites")

    def add_favorite(self, favorite_data: FavoriteCreate, user_id: str) -> FavoriteResponse:
        """Add a favorite; re-adding the same recipe overwrites notes and rating."""
        try:
            row = {
                "user_id": user_id,
                "recipe_name": favorite_data.recipe_name,
                "recipe_type": favorite_data.recipe_type,
                "custom_recipe_id": favorite_data.custom_recipe_id or None,
                "notes": favorite_data.notes or None,
                "rating": favorite_data.rating or None,
            }
            result = self.supabase.table(TABLE)\
                .upsert(row, on_conflict="user_id,recipe_name,recipe_type")\
                .execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add favorite")

            return FavoriteResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error adding favorite: {e}")
            raise HTTPException(status_code=500, detail="Failed to add favorite")

    def update_favorite(self, favorite_data: FavoriteUpdate, user_id: str) -> FavoriteResponse:
        """Update rating and/or notes of an existing favorite"""
        try:
            update_data = favorite_data.model_dump(include={"notes", "rating"}, exclude_unset=True)
            if not update_data:
                raise HTTPException(status_code=400, detail="Nothing to update")

            result = self.supabase.table(TABLE)\
                .update(update_data)\
                .eq("user_id", user_id)\
                .eq("recipe_name", favorite_data.recipe_name)\
                .eq("recipe_type", favorite_data.recipe_type)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Favorite not found")

            return FavoriteResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating favorite: {e}")
            raise HTTPException(status_code=500, detail="Failed to update favorite")

    def remove_favorite(self, recipe_name: str, recipe_type: str, user_id: str) -> bool:
        try:
            self.supabase.table(TABLE)\
                .delete()\
                .eq("user_id", user_id)\
                .eq("recipe_name", recipe_name)\
                .eq("recipe_type", recipe_type)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error removing favorite: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove favorite")
