from pydantic import BaseModel, Field, ValidationInfo, field_validator
from typing import Optional, List, Literal
from datetime import datetime

Difficulty = Literal["Easy", "Medium", "Hard"]


class Ingredient(BaseModel):
    item: str
    amount: str = ""
    calories: Optional[float] = None


class Nutrition(BaseModel):
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    fiber: Optional[float] = None


class RecipeCreate(BaseModel):
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    servings: Optional[int] = Field(default=None, ge=1)
    calories: Optional[int] = Field(default=None, ge=0)
    difficulty: Optional[Difficulty] = None
    tags: Optional[List[str]] = None
    ingredients: Optional[List[Ingredient]] = None
    prep_steps: Optional[List[str]] = None
    cooking_steps: Optional[List[str]] = None
    nutrition: Optional[Nutrition] = None
    is_public: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Recipe name is required")
        return value.strip()


class RecipeUpdate(BaseModel):
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    servings: Optional[int] = Field(default=None, ge=1)
    calories: Optional[int] = Field(default=None, ge=0)
    difficulty: Optional[Difficulty] = None
    tags: Optional[List[str]] = None
    ingredients: Optional[List[Ingredient]] = None
    prep_steps: Optional[List[str]] = None
    cooking_steps: Optional[List[str]] = None
    nutrition: Optional[Nutrition] = None
    is_public: Optional[bool] = None

    @field_validator("id")
    @classmethod
    def id_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Recipe ID is required")
        return value

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> str:
        if value is None or not value.strip():
            raise ValueError("Recipe name cannot be blank")
        return value.strip()

    @field_validator("tags", "ingredients", "prep_steps", "cooking_steps", "nutrition", "is_public")
    @classmethod
    def not_null(cls, value, info: ValidationInfo):
        # Only reached when the field is sent; omitted fields keep their stored value
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class RecipeResponse(BaseModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    servings: Optional[int] = 4
    calories: Optional[int] = None
    difficulty: Optional[str] = "Medium"
    tags: List[str] = []
    ingredients: List[Ingredient] = []
    prep_steps: List[str] = []
    cooking_steps: List[str] = []
    nutrition: Nutrition = Nutrition()
    is_public: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RecipeResult(BaseModel):
    recipe: RecipeResponse


class RecipeListResult(BaseModel):
    recipes: List[RecipeResponse]
