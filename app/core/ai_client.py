"""Claude access shared by the cooking assistant and the food scanner."""
import anthropic
from fastapi import HTTPException
from app.config import settings
from typing import List, Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


class AIClient:
    _client: anthropic.Anthropic = None

    def __init__(self, client: anthropic.Anthropic, model: str):
        self.client = client
        self.model = model

    @classmethod
    def get_client(cls) -> anthropic.Anthropic:
        if cls._client is None:
            cls._client = anthropic.Anthropic(api_key=settings.anthropic_api_key)
        return cls._client

    @classmethod
    def reset_client(cls):
        cls._client = None

    def complete(
        self,
        messages: List[Dict[str, Any]],
        system: Optional[str] = None,
        max_tokens: int = 1024,
    ) -> str:
        """Send messages to Claude and return the concatenated text blocks of the reply."""
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system
        response = self.client.messages.create(**kwargs)
        return "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )


def get_ai_client() -> AIClient:
    if not settings.anthropic_api_key:
        raise HTTPException(status_code=503, detail="AI not configured")
    return AIClient(AIClient.get_client(), settings.anthropic_model)
