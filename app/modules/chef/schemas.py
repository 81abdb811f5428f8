from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class FamilyMemberContext(BaseModel):
    name: str
    allergies: List[str] = []
    restrictions: List[str] = []
    likes: List[str] = []
    dislikes: List[str] = []


class FamilyProfileContext(BaseModel):
    members: List[FamilyMemberContext] = []


class ScannedIngredient(BaseModel):
    name: str
    quantity: Optional[str] = None


class ChefRequest(BaseModel):
    message: str = Field(min_length=1)
    conversation_history: List[ChatMessage] = []
    user_id: Optional[str] = None
    family_profile: Optional[FamilyProfileContext] = None
    current_meal_plan: Optional[Dict[str, Any]] = None
    scanned_ingredients: Optional[List[ScannedIngredient]] = None


class ChefResponse(BaseModel):
    message: str
    conversation_history: List[ChatMessage]


class ChefHistoryResponse(BaseModel):
    messages: List[ChatMessage] = []
