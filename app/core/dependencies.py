"""
Core dependencies for request identity and ownership checks
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_auth_client
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

ANONYMOUS_USER_ID = "anonymous"
USER_ID_HEADER = "x-user-id"

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_auth_client)) -> AuthService:
    return AuthService(supabase)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(credentials.credentials)


def get_request_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security),
) -> str:
    """
    Resolve the id that owns rows touched by this request.
    A bearer token wins; otherwise the browser-generated id from the x-user-id header,
    falling back to the shared anonymous id.
    """
    if credentials is not None:
        auth_service = AuthService(get_auth_client())
        return auth_service.get_current_user(credentials.credentials)["id"]
    header_value = (request.headers.get(USER_ID_HEADER) or "").strip()
    return header_value or ANONYMOUS_USER_ID


def check_owner(owner_id: Optional[str], user_id: str, action: str = "modify", resource: str = "record") -> None:
    """Raise 403 unless the row owner is the requesting user."""
    if owner_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not authorized to {action} this {resource}"
        )


def check_path_owner(path: str, user_id: str) -> None:
    """Storage paths are prefixed with the owner's id."""
    if not path or not path.startswith(f"{user_id}/") or ".." in path.split("/"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this file"
        )
