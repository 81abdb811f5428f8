import httpx
from fastapi import HTTPException
from app.modules.voice.schemas import VoiceListResponse
from typing import Optional
import logging

logger = logging.getLogger(__name__)

VOICE_OPTIONS = {
    "rachel": "21m00Tcm4TlvDq8ikWAM",
    "josh": "TxGEqnHWrfWFTfGW9XjX",
    "bella": "EXAVITQu4vr4xnSDxMaL",
    "adam": "pNInz6obpgDQGcFmaJgB",
}
VOICE_DESCRIPTIONS = {
    "rachel": "Warm, friendly female voice (recommended for cooking assistant)",
    "josh": "Friendly, approachable male voice",
    "bella": "Soft, gentle female voice",
    "adam": "Deep, authoritative male voice",
}
DEFAULT_VOICE = "rachel"

TTS_MODEL = "eleven_turbo_v2_5"
VOICE_SETTINGS = {
    "stability": 0.5,
    "similarity_boost": 0.75,
    "style": 0.5,
    "use_speaker_boost": True,
}


def list_voices() -> VoiceListResponse:
    return VoiceListResponse(voices=list(VOICE_OPTIONS), default=DEFAULT_VOICE, description=VOICE_DESCRIPTIONS)


def resolve_voice_id(voice: Optional[str]) -> str:
    """Voice id for a voice name; unknown or missing names get the default voice."""
    return VOICE_OPTIONS.get((voice or "").lower(), VOICE_OPTIONS[DEFAULT_VOICE])


class VoiceService:
    def __init__(self, http_client: httpx.AsyncClient, api_key: str, api_url: str):
        self.http_client = http_client
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")

    async def synthesize(self, text: str, voice: Optional[str] = None) -> bytes:
        """Text-to-speech through ElevenLabs; returns MP3 bytes."""
        voice_id = resolve_voice_id(voice)
        try:
            response = await self.http_client.post(
                f"{self.api_url}/text-to-speech/{voice_id}/stream",
                headers={
                    "Accept": "audio/mpeg",
                    "Content-Type": "application/json",
                    "xi-api-key": self.api_key,
                },
                json={
                    "text": text,
                    "model_id": TTS_MODEL,
                    "voice_settings": VOICE_SETTINGS,
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Voice API error: {e}")
            raise HTTPException(status_code=500, detail="Voice service error")

        if response.status_code >= 400:
            logger.error(f"ElevenLabs error {response.status_code}: {response.text[:500]}")
            raise HTTPException(status_code=response.status_code, detail="Voice generation failed")
        return response.content
