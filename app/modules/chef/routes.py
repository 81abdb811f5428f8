from fastapi import APIRouter, Depends, Request
from app.core.ai_client import AIClient, get_ai_client
from app.core.limiter import limiter
from app.config import settings
from app.database.supabase_client import get_optional_supabase
from app.modules.chef.schemas import ChefRequest, ChefResponse, ChefHistoryResponse
from app.modules.chef.service import ChefService
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/ai-chef", tags=["ai-chef"])


def get_chef_service(
    ai_client: AIClient = Depends(get_ai_client),
    supabase: Optional[Client] = Depends(get_optional_supabase)
) -> ChefService:
    return ChefService(ai_client, supabase)


def get_history_service(supabase: Optional[Client] = Depends(get_optional_supabase)) -> ChefService:
    # Reading transcripts never calls the model
    return ChefService(None, supabase)


@router.post("", response_model=ChefResponse)
@limiter.limit(settings.ai_rate_limit)
def chat(
    request: Request,
    chef_request: ChefRequest,
    service: ChefService = Depends(get_chef_service)
):
    """Send a message to the cooking assistant"""
    return service.chat(chef_request)


@router.get("", response_model=ChefHistoryResponse)
async def get_history(
    user_id: str,
    service: ChefService = Depends(get_history_service)
):
    """Stored conversation for a user id (email or UUID)"""
    return service.get_history(user_id)
