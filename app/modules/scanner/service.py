from app.core.ai_client import AIClient
from app.modules.scanner.prompts import SCAN_PROMPTS, DEFAULT_MODE
from app.modules.scanner.schemas import ScanRequest, ScanResponse
from typing import Tuple, Dict, Any, Optional
from fastapi import HTTPException
import json
import re
import logging

logger = logging.getLogger(__name__)

MAX_TOKENS = 2048
SUPPORTED_MEDIA_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")

DATA_URL_RE = re.compile(r"^data:(.+?);base64,(.+)$", re.DOTALL)
JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def parse_data_url(image: str) -> Tuple[str, str]:
    """Split a base64 data URL into (media_type, data)."""
    match = DATA_URL_RE.match(image)
    if not match:
        raise HTTPException(status_code=400, detail="Invalid image format")
    media_type, data = match.group(1), match.group(2)
    if media_type not in SUPPORTED_MEDIA_TYPES:
        raise HTTPException(status_code=400, detail=f"Unsupported image type: {media_type}")
    return media_type, data


def extract_json(text: str) -> Optional[Dict[str, Any]]:
    """First-brace-to-last-brace span of the reply parsed as JSON, or None."""
    match = JSON_OBJECT_RE.search(text)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


class ScannerService:
    def __init__(self, ai_client: AIClient):
        self.ai_client = ai_client

    def scan(self, request: ScanRequest) -> ScanResponse:
        if not request.image:
            raise HTTPException(status_code=400, detail="No image provided")
        mode = request.mode if request.mode in SCAN_PROMPTS else DEFAULT_MODE
        media_type, data = parse_data_url(request.image)

        try:
            text = self.ai_client.complete(
                [{
                    "role": "user",
                    "content": [
                        {"type": "image", "source": {"type": "base64", "media_type": media_type, "data": data}},
                        {"type": "text", "text": SCAN_PROMPTS[mode]},
                    ],
                }],
                max_tokens=MAX_TOKENS,
            )
        except Exception as e:
            logger.error(f"Food scan error: {e}")
            raise HTTPException(status_code=500, detail="Failed to analyze image")

        if not text:
            raise HTTPException(status_code=500, detail="No response from AI")

        parsed = extract_json(text)
        if parsed is None:
            logger.info(f"Scan reply in mode {mode} was not JSON; returning raw text")
            return ScanResponse(data={"raw": text}, mode=mode)
        return ScanResponse(data=parsed, mode=mode)
