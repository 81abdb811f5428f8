import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from app.config import settings
from app.core.limiter import limiter
from app.modules.voice.schemas import SpeechRequest, VoiceListResponse
from app.modules.voice.service import VoiceService, list_voices

router = APIRouter(prefix="/voice", tags=["voice"])


async def get_http_client():
    async with httpx.AsyncClient(timeout=30.0) as client:
        yield client


def get_voice_service(http_client: httpx.AsyncClient = Depends(get_http_client)) -> VoiceService:
    if not settings.elevenlabs_api_key:
        raise HTTPException(status_code=503, detail="Voice service not configured")
    return VoiceService(http_client, settings.elevenlabs_api_key, settings.elevenlabs_api_url)


@router.get("", response_model=VoiceListResponse)
async def get_voices():
    """Available voices"""
    return list_voices()


@router.post("")
@limiter.limit(settings.ai_rate_limit)
async def synthesize(
    request: Request,
    speech_request: SpeechRequest,
    service: VoiceService = Depends(get_voice_service)
):
    """Speak text with the chosen voice; returns audio/mpeg"""
    audio = await service.synthesize(speech_request.text, speech_request.voice)
    return Response(content=audio, media_type="audio/mpeg", headers={"Cache-Control": "no-cache"})
