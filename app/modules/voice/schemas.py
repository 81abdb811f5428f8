from pydantic import BaseModel, Field
from typing import Optional, Dict, List


class SpeechRequest(BaseModel):
    text: str = Field(min_length=1, max_length=5000)
    voice: Optional[str] = None


class VoiceListResponse(BaseModel):
    voices: List[str]
    default: str
    description: Dict[str, str]
