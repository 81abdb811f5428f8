from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime

RecipeType = Literal["builtin", "custom"]


class FavoriteCreate(BaseModel):
    recipe_name: str = Field(min_length=1)
    recipe_type: RecipeType = "builtin"
    custom_recipe_id: Optional[str] = None
    notes: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)


class FavoriteUpdate(BaseModel):
    recipe_name: str = Field(min_length=1)
    recipe_type: RecipeType = "builtin"
    notes: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)


class FavoriteResponse(BaseModel):
    id: str
    user_id: str
    recipe_name: str
    recipe_type: str = "builtin"
    custom_recipe_id: Optional[str] = None
    notes: Optional[str] = None
    rating: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FavoriteResult(BaseModel):
    favorite: FavoriteResponse


class FavoriteListResult(BaseModel):
    favorites: List[FavoriteResponse]
