from supabase import Client
from app.modules.recipes.schemas import RecipeCreate, RecipeUpdate, RecipeResponse
from app.core.dependencies import check_owner
from typing import List
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

TABLE = "custom_recipes"


class RecipeService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _fetch(self, recipe_id: str, columns: str = "*") -> dict:
        result = self.supabase.table(TABLE)\
            .select(columns)\
            .eq("id", recipe_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Recipe not found")
        return result.data

    def get_recipe(self, recipe_id: str, user_id: str) -> RecipeResponse:
        """Get a recipe visible to the user (own or public). Private recipes of others read as missing."""
        try:
            row = self._fetch(recipe_id)
            if row.get("user_id") != user_id and not row.get("is_public"):
                raise HTTPException(status_code=404, detail="Recipe not found")
            return RecipeResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching recipe {recipe_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch recipe")

    def list_recipes(self, user_id: str, include_public: bool = False) -> List[RecipeResponse]:
        """List the user's recipes, newest first, optionally together with everyone's public recipes."""
        try:
            query = self.supabase.table(TABLE).select("*")
            if include_public:
                query = query.or_(f"user_id.eq.{user_id},is_public.eq.true")
            else:
                query = query.eq("user_id", user_id)
            result = query.order("created_at", desc=True).execute()
            return [RecipeResponse(**row) for row in (result.data or [])]
        except Exception as e:
            logger.error(f"Error fetching recipes: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch recipes")

    def create_recipe(self, recipe_data: RecipeCreate, user_id: str) -> RecipeResponse:
        """Create a recipe owned by user_id, filling in defaults."""
        try:
            insert_data = {
                "user_id": user_id,
                "name": recipe_data.name,
                "description": (recipe_data.description or "").strip() or None,
                "image_url": recipe_data.image_url or None,
                "prep_time": recipe_data.prep_time or None,
                "cook_time": recipe_data.cook_time or None,
                "servings": recipe_data.servings or 4,
                "calories": recipe_data.calories or None,
                "difficulty": recipe_data.difficulty or "Medium",
                "tags": recipe_data.tags or [],
                "ingredients": [i.model_dump() for i in recipe_data.ingredients or []],
                "prep_steps": recipe_data.prep_steps or [],
                "cooking_steps": recipe_data.cooking_steps or [],
                "nutrition": recipe_data.nutrition.model_dump(exclude_none=True) if recipe_data.nutrition else {},
                "is_public": bool(recipe_data.is_public),
            }
            result = self.supabase.table(TABLE).insert(insert_data).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create recipe")

            return RecipeResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating recipe: {e}")
            raise HTTPException(status_code=500, detail="Failed to create recipe")

    def update_recipe(self, recipe_data: RecipeUpdate, user_id: str) -> RecipeResponse:
        """Update a recipe after verifying the user owns it."""
        try:
            existing = self._fetch(recipe_data.id, "user_id")
            check_owner(existing.get("user_id"), user_id, "edit", "recipe")

            update_data = recipe_data.model_dump(exclude={"id"}, exclude_unset=True)
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

            result = self.supabase.table(TABLE)\
                .update(update_data)\
                .eq("id", recipe_data.id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Recipe not found")

            return RecipeResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating recipe {recipe_data.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update recipe")

    def delete_recipe(self, recipe_id: str, user_id: str) -> bool:
        """Delete a recipe after verifying the user owns it."""
        try:
            existing = self._fetch(recipe_id, "user_id")
            check_owner(existing.get("user_id"), user_id, "delete", "recipe")

            self.supabase.table(TABLE)\
                .delete()\
                .eq("id", recipe_id)\
                .execute()
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting recipe {recipe_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete recipe")
