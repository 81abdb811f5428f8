from pydantic import BaseModel
from typing import Optional, Dict, Any


class ScanRequest(BaseModel):
    image: Optional[str] = None  # data URL: data:<media type>;base64,<data>
    mode: Optional[str] = None


class ScanResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]
    mode: str
