from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase
from app.modules.recipes.schemas import RecipeCreate, RecipeUpdate, RecipeResult, RecipeListResult
from app.modules.recipes.service import RecipeService
from app.core.dependencies import get_request_user_id
from supabase import Client
from typing import Optional, Union

router = APIRouter(prefix="/recipes", tags=["recipes"])


def get_recipe_service(supabase: Client = Depends(get_supabase)) -> RecipeService:
    return RecipeService(supabase)


@router.get("", response_model=Union[RecipeResult, RecipeListResult])
async def get_recipes(
    id: Optional[str] = None,
    include_public: bool = False,
    user_id: str = Depends(get_request_user_id),
    service: RecipeService = Depends(get_recipe_service)
):
    """Fetch one recipe by id, or the user's recipes (plus public ones when include_public=true)"""
    if id:
        return RecipeResult(recipe=service.get_recipe(id, user_id))
    return RecipeListResult(recipes=service.list_recipes(user_id, include_public))


@router.post("", response_model=RecipeResult, status_code=201)
async def create_recipe(
    recipe_data: RecipeCreate,
    user_id: str = Depends(get_request_user_id),
    service: RecipeService = Depends(get_recipe_service)
):
    """Create a new recipe"""
    return RecipeResult(recipe=service.create_recipe(recipe_data, user_id))


@router.put("", response_model=RecipeResult)
async def update_recipe(
    recipe_data: RecipeUpdate,
    user_id: str = Depends(get_request_user_id),
    service: RecipeService = Depends(get_recipe_service)
):
    """Update one of the user's recipes"""
    return RecipeResult(recipe=service.update_recipe(recipe_data, user_id))


@router.delete("")
async def delete_recipe(
    id: Optional[str] = None,
    user_id: str = Depends(get_request_user_id),
    service: RecipeService = Depends(get_recipe_service)
):
    """Delete one of the user's recipes"""
    if not id:
        raise HTTPException(status_code=400, detail="Recipe ID is required")
    service.delete_recipe(id, user_id)
    return {"success": True}
