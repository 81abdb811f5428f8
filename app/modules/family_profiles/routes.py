from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.family_profiles.schemas import (
    FamilyProfileUpdate, FamilyProfileResponse, FamilyMemberCreate, FamilyMemberUpdate
)
from app.modules.family_profiles.service import FamilyProfileService
from app.core.dependencies import get_request_user_id
from supabase import Client

router = APIRouter(prefix="/family-profile", tags=["family-profile"])


def get_family_profile_service(supabase: Client = Depends(get_supabase)) -> FamilyProfileService:
    return FamilyProfileService(supabase)


@router.get("", response_model=FamilyProfileResponse)
async def get_profile(
    user_id: str = Depends(get_request_user_id),
    service: FamilyProfileService = Depends(get_family_profile_service)
):
    """Get the user's family profile"""
    return service.get_profile(user_id)


@router.put("", response_model=FamilyProfileResponse)
async def save_profile(
    profile_data: FamilyProfileUpdate,
    user_id: str = Depends(get_request_user_id),
    service: FamilyProfileService = Depends(get_family_profile_service)
):
    """Create or update the user's family profile"""
    return service.save_profile(profile_data, user_id)


@router.post("/members", response_model=FamilyProfileResponse, status_code=201)
async def add_member(
    member_data: FamilyMemberCreate,
    user_id: str = Depends(get_request_user_id),
    service: FamilyProfileService = Depends(get_family_profile_service)
):
    """Add a family member"""
    return service.add_member(member_data, user_id)


@router.put("/members/{member_id}", response_model=FamilyProfileResponse)
async def update_member(
    member_id: str,
    member_data: FamilyMemberUpdate,
    user_id: str = Depends(get_request_user_id),
    service: FamilyProfileService = Depends(get_family_profile_service)
):
    """Update a family member"""
    return service.update_member(member_id, member_data, user_id)


@router.delete("/members/{member_id}", response_model=FamilyProfileResponse)
async def remove_member(
    member_id: str,
    user_id: str = Depends(get_request_user_id),
    service: FamilyProfileService = Depends(get_family_profile_service)
):
    """Remove a family member"""
    return service.remove_member(member_id, user_id)
