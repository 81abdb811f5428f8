from pydantic import BaseModel, Field, ValidationInfo, field_validator
from typing import Optional, List, Literal
from datetime import datetime

MemberRole = Literal["adult", "child", "teen", "senior"]
SkillLevel = Literal["beginner", "intermediate", "advanced"]


class FamilyMemberCreate(BaseModel):
    name: str = Field(min_length=1)
    role: MemberRole = "adult"
    allergies: List[str] = []
    restrictions: List[str] = []
    likes: List[str] = []
    dislikes: List[str] = []
    notes: Optional[str] = None


class FamilyMemberUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    role: Optional[MemberRole] = None
    allergies: Optional[List[str]] = None
    restrictions: Optional[List[str]] = None
    likes: Optional[List[str]] = None
    dislikes: Optional[List[str]] = None
    notes: Optional[str] = None

    @field_validator("name", "role", "allergies", "restrictions", "likes", "dislikes")
    @classmethod
    def not_null(cls, value, info: ValidationInfo):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class FamilyMember(FamilyMemberCreate):
    id: str


class FamilyMemberIn(FamilyMemberCreate):
    id: Optional[str] = None


class Preferences(BaseModel):
    cuisine_types: Optional[List[str]] = None
    meal_prep_style: Optional[Literal["quick", "batch", "traditional"]] = None
    budget_level: Optional[Literal["budget", "moderate", "premium"]] = None
    organic_preference: Optional[bool] = None


class FamilyProfileUpdate(BaseModel):
    family_name: Optional[str] = None
    members: Optional[List[FamilyMemberIn]] = None
    skill_level: Optional[SkillLevel] = None
    preferences: Optional[Preferences] = None


class FamilyProfileResponse(BaseModel):
    id: str
    user_id: str
    family_name: str = "My Family"
    members: List[FamilyMember] = []
    skill_level: str = "intermediate"
    preferences: Preferences = Preferences()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
