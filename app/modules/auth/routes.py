from fastapi import APIRouter, Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, RefreshRequest, TokenResponse, RegisterResponse, OAuthUrlResponse
)
from app.modules.auth.service import AuthService
from app.modules.billing.service import BillingService
from app.core.dependencies import get_auth_service, get_current_user
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/auth", tags=["auth"])

# Security scheme for JWT Bearer token
security = HTTPBearer()


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    refresh_data: RefreshRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Exchange a refresh token for a new access token"""
    return service.refresh(refresh_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/oauth/{provider}", response_model=OAuthUrlResponse)
async def oauth_url(
    provider: str,
    redirect_to: Optional[str] = None,
    service: AuthService = Depends(get_auth_service)
):
    """Authorization URL for Google or Apple sign-in."""
    return service.get_oauth_url(provider, redirect_to)


@router.get("/me")
async def get_me(
    current_user: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Get current authenticated user and their subscription plan."""
    subscription = BillingService(supabase).get_subscription(current_user["id"])
    return {**current_user, "plan": subscription.plan, "subscription_status": subscription.status}
