from supabase import Client
from app.core.ai_client import AIClient
from app.modules.chef.prompts import CHEF_SYSTEM_PROMPT
from app.modules.chef.schemas import (
    ChefRequest, ChefResponse, ChefHistoryResponse, ChatMessage,
    FamilyProfileContext, ScannedIngredient
)
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
from datetime import datetime, timezone
import json
import re
import logging

logger = logging.getLogger(__name__)

TABLE = "chef_conversations"
HISTORY_WINDOW = 20
MAX_TOKENS = 1024

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


def is_valid_conversation_user_id(user_id: str) -> bool:
    return bool(EMAIL_RE.match(user_id) or UUID_RE.match(user_id))


def build_context(
    family_profile: Optional[FamilyProfileContext] = None,
    current_meal_plan: Optional[Dict[str, Any]] = None,
    scanned_ingredients: Optional[List[ScannedIngredient]] = None,
) -> str:
    """Markdown context block appended to the system prompt; empty when nothing is known."""
    context = ""

    if family_profile and family_profile.members:
        context += "\n\n## Family Profile:\n"
        for member in family_profile.members:
            context += f"- **{member.name}**"
            if member.allergies:
                context += f" | Allergies: {', '.join(member.allergies)}"
            if member.restrictions:
                context += f" | Restrictions: {', '.join(member.restrictions)}"
            if member.dislikes:
                context += f" | Dislikes: {', '.join(member.dislikes)}"
            context += "\n"

    if current_meal_plan:
        context += "\n## Current Meal Plan:\n"
        for day, meals in current_meal_plan.items():
            context += f"{day}: {json.dumps(meals)}\n"

    if scanned_ingredients:
        context += "\n## Recently Scanned Ingredients:\n"
        context += "\n".join(
            f"- {item.name}" + (f" ({item.quantity})" if item.quantity else "")
            for item in scanned_ingredients
        )

    return context


def build_system_prompt(context: str) -> str:
    if not context:
        return CHEF_SYSTEM_PROMPT
    return f"{CHEF_SYSTEM_PROMPT}\n\n---\n## Current Context:{context}"


class ChefService:
    def __init__(self, ai_client: AIClient, supabase: Optional[Client] = None):
        self.ai_client = ai_client
        self.supabase = supabase

    def chat(self, request: ChefRequest) -> ChefResponse:
        """Answer one user message, keeping the last HISTORY_WINDOW history messages as context."""
        context = build_context(request.family_profile, request.current_meal_plan, request.scanned_ingredients)
        history = request.conversation_history
        messages = [m.model_dump() for m in history[-HISTORY_WINDOW:]]
        messages.append({"role": "user", "content": request.message})

        try:
            reply = self.ai_client.complete(messages, system=build_system_prompt(context), max_tokens=MAX_TOKENS)
        except Exception as e:
            logger.error(f"AI Chef error: {e}")
            raise HTTPException(status_code=500, detail="Failed to get response from AI Chef")

        full_history = [
            *history,
            ChatMessage(role="user", content=request.message),
            ChatMessage(role="assistant", content=reply),
        ]
        if request.user_id:
            self._save_conversation(request.user_id, full_history, request.family_profile)
        return ChefResponse(message=reply, conversation_history=full_history)

    def _save_conversation(
        self,
        user_id: str,
        history: List[ChatMessage],
        family_profile: Optional[FamilyProfileContext],
    ) -> None:
        # Transcript storage is optional; a failed write must not fail the chat
        if self.supabase is None:
            return
        try:
            self.supabase.table(TABLE).upsert({
                "user_id": user_id,
                "messages": [m.model_dump() for m in history],
                "family_profile": family_profile.model_dump() if family_profile else None,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }, on_conflict="user_id").execute()
        except Exception as e:
            logger.error(f"Failed to save conversation for {user_id}: {e}")

    def get_history(self, user_id: str) -> ChefHistoryResponse:
        """Stored transcript for user_id. The stored family profile stays server-side."""
        if not is_valid_conversation_user_id(user_id):
            raise HTTPException(status_code=400, detail="Invalid userId format")
        if self.supabase is None:
            return ChefHistoryResponse()
        try:
            result = self.supabase.table(TABLE)\
                .select("messages")\
                .eq("user_id", user_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.warning(f"Failed to load conversation for {user_id}: {e}")
            return ChefHistoryResponse()
        messages = (result.data or {}).get("messages") if result else None
        return ChefHistoryResponse(messages=messages or [])
