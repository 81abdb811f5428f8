from supabase import Client
from app.modules.family_profiles.schemas import (
    FamilyProfileUpdate, FamilyProfileResponse, FamilyMember, FamilyMemberCreate, FamilyMemberUpdate
)
from typing import Optional, List
from fastapi import HTTPException
from datetime import datetime, timezone
import uuid
import logging

logger = logging.getLogger(__name__)

TABLE = "family_profiles"
DEFAULT_FAMILY_NAME = "My Family"
DEFAULT_SKILL_LEVEL = "intermediate"


def _new_member_id() -> str:
    return uuid.uuid4().hex


class FamilyProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _find(self, user_id: str) -> Optional[dict]:
        result = self.supabase.table(TABLE)\
            .select("*")\
            .eq("user_id", user_id)\
            .maybe_single()\
            .execute()
        return result.data if result else None

    def _write(self, user_id: str, row: dict) -> FamilyProfileResponse:
        row = {**row, "user_id": user_id, "updated_at": datetime.now(timezone.utc).isoformat()}
        result = self.supabase.table(TABLE)\
            .upsert(row, on_conflict="user_id")\
            .execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to save family profile")
        return FamilyProfileResponse(**result.data[0])

    def get_profile(self, user_id: str) -> FamilyProfileResponse:
        try:
            row = self._find(user_id)
            if not row:
                raise HTTPException(status_code=404, detail="Family profile not found")
            return FamilyProfileResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Load profile error: {e}")
            raise HTTPException(status_code=500, detail="Failed to load family profile")

    def save_profile(self, profile_data: FamilyProfileUpdate, user_id: str) -> FamilyProfileResponse:
        """Create or update the profile. Unset fields keep their stored value; preferences are merged."""
        try:
            existing = self._find(user_id) or {}
            members = existing.get("members") or []
            if profile_data.members is not None:
                members = [
                    {**m.model_dump(), "id": m.id or _new_member_id()}
                    for m in profile_data.members
                ]
            preferences = dict(existing.get("preferences") or {})
            if profile_data.preferences is not None:
                preferences.update(profile_data.preferences.model_dump(exclude_none=True))
            row = {
                "family_name": profile_data.family_name or existing.get("family_name") or DEFAULT_FAMILY_NAME,
                "members": members,
                "skill_level": profile_data.skill_level or existing.get("skill_level") or DEFAULT_SKILL_LEVEL,
                "preferences": preferences,
            }
            if existing.get("id"):
                row["id"] = existing["id"]
            return self._write(user_id, row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Save profile error: {e}")
            raise HTTPException(status_code=500, detail="Failed to save family profile")

    def _save_members(self, user_id: str, existing: dict, members: List[dict]) -> FamilyProfileResponse:
        row = {
            "family_name": existing.get("family_name") or DEFAULT_FAMILY_NAME,
            "members": members,
            "skill_level": existing.get("skill_level") or DEFAULT_SKILL_LEVEL,
            "preferences": existing.get("preferences") or {},
        }
        if existing.get("id"):
            row["id"] = existing["id"]
        return self._write(user_id, row)

    def add_member(self, member_data: FamilyMemberCreate, user_id: str) -> FamilyProfileResponse:
        """Append a member, creating a default profile when the user has none."""
        try:
            existing = self._find(user_id) or {}
            members = list(existing.get("members") or [])
            members.append({**member_data.model_dump(), "id": _new_member_id()})
            return self._save_members(user_id, existing, members)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Add member error: {e}")
            raise HTTPException(status_code=500, detail="Failed to add family member")

    def update_member(self, member_id: str, member_data: FamilyMemberUpdate, user_id: str) -> FamilyProfileResponse:
        try:
            existing = self._find(user_id)
            if not existing:
                raise HTTPException(status_code=404, detail="Family profile not found")
            members = list(existing.get("members") or [])
            for index, member in enumerate(members):
                if member.get("id") == member_id:
                    merged = {**member, **member_data.model_dump(exclude_unset=True), "id": member_id}
                    members[index] = FamilyMember(**merged).model_dump()
                    break
            else:
                raise HTTPException(status_code=404, detail="Family member not found")
            return self._save_members(user_id, existing, members)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Update member error: {e}")
            raise HTTPException(status_code=500, detail="Failed to update family member")

    def remove_member(self, member_id: str, user_id: str) -> FamilyProfileResponse:
        try:
            existing = self._find(user_id)
            if not existing:
                raise HTTPException(status_code=404, detail="Family profile not found")
            members = existing.get("members") or []
            remaining = [m for m in members if m.get("id") != member_id]
            if len(remaining) == len(members):
                raise HTTPException(status_code=404, detail="Family member not found")
            return self._save_members(user_id, existing, remaining)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Remove member error: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove family member")
