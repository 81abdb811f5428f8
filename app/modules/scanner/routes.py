from fastapi import APIRouter, Depends, Request
from app.core.ai_client import AIClient, get_ai_client
from app.core.limiter import limiter
from app.config import settings
from app.modules.scanner.schemas import ScanRequest, ScanResponse
from app.modules.scanner.service import ScannerService

router = APIRouter(prefix="/scan-food", tags=["scan-food"])


def get_scanner_service(ai_client: AIClient = Depends(get_ai_client)) -> ScannerService:
    return ScannerService(ai_client)


@router.post("", response_model=ScanResponse)
@limiter.limit(settings.ai_rate_limit)
def scan_food(
    request: Request,
    scan_request: ScanRequest,
    service: ScannerService = Depends(get_scanner_service)
):
    """
    Analyze a food photo.
    mode=identify lists ingredients, mode=budget suggests cheap meals,
    mode=leftovers suggests ways to use leftovers. Unknown modes fall back to identify.
    """
    return service.scan(scan_request)
