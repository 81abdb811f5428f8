import hashlib
import threading
import time
from collections import OrderedDict
from supabase import Client
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, RefreshRequest, TokenResponse, RegisterResponse, OAuthUrlResponse
)
from fastapi import HTTPException
from typing import Dict, Any, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

OAUTH_PROVIDERS = ("google", "apple")


class TokenUserCache:
    """Token -> user lookups kept for a short TTL; least recently used entries are evicted first."""

    def __init__(self, ttl_seconds: float = 60, max_size: int = 500):
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._entries: "OrderedDict[str, Tuple[Dict[str, Any], float]]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def _key(token: str) -> str:
        return hashlib.sha256(token.encode()).hexdigest()

    def get(self, token: str) -> Optional[Dict[str, Any]]:
        key = self._key(token)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            user, expires_at = entry
            if time.monotonic() >= expires_at:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return user

    def put(self, token: str, user: Dict[str, Any]) -> None:
        key = self._key(token)
        with self._lock:
            self._entries[key] = (user, time.monotonic() + self.ttl_seconds)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def discard(self, token: str) -> None:
        with self._lock:
            self._entries.pop(self._key(token), None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


token_cache = TokenUserCache()


def _user_payload(user) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "user_metadata": user.user_metadata or {},
        "app_metadata": user.app_metadata or {},
        "created_at": user.created_at,
    }


def _mentions(error: Exception, *needles: str) -> bool:
    text = str(error).lower()
    return any(n.lower() in text for n in needles)


class AuthService:
    """Supabase Auth on behalf of the web client"""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _token_response(self, auth_response, fallback_email: str) -> TokenResponse:
        session = auth_response.session
        return TokenResponse(
            access_token=session.access_token,
            refresh_token=getattr(session, "refresh_token", None),
            expires_in=getattr(session, "expires_in", None),
            user_id=auth_response.user.id,
            email=auth_response.user.email or fallback_email,
        )

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        options = {"data": {"full_name": register_data.full_name}} if register_data.full_name else {"data": {}}
        try:
            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": options,
            })
        except Exception as e:
            if _mentions(e, "already registered", "already exists"):
                raise HTTPException(status_code=400, detail="User already exists")
            logger.error(f"Registration failed for {register_data.email}: {e}")
            raise HTTPException(status_code=500, detail="Registration failed")

        if not auth_response.user:
            raise HTTPException(status_code=400, detail="Failed to register user")
        logger.info(f"Registered user {auth_response.user.id}")
        return RegisterResponse(
            user_id=auth_response.user.id,
            email=auth_response.user.email or register_data.email,
            message="User registered successfully",
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password,
            })
        except Exception as e:
            if _mentions(e, "invalid", "credentials"):
                raise HTTPException(status_code=401, detail="Invalid email or password")
            logger.error(f"Login failed for {login_data.email}: {e}")
            raise HTTPException(status_code=500, detail="Login failed")

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid credentials")
        return self._token_response(auth_response, login_data.email)

    def refresh(self, refresh_data: RefreshRequest) -> TokenResponse:
        """Trade a refresh token for a new access token"""
        try:
            auth_response = self.supabase.auth.refresh_session(refresh_data.refresh_token)
        except Exception as e:
            logger.info(f"Session refresh rejected: {e}")
            raise HTTPException(status_code=401, detail="Invalid or expired refresh token")
        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid or expired refresh token")
        return self._token_response(auth_response, "")

    def get_oauth_url(self, provider: str, redirect_to: Optional[str] = None) -> OAuthUrlResponse:
        """Build the provider authorization URL for Google or Apple sign-in."""
        provider = provider.lower()
        if provider not in OAUTH_PROVIDERS:
            raise HTTPException(status_code=400, detail=f"Unsupported OAuth provider: {provider}")
        credentials: Dict[str, Any] = {"provider": provider}
        if redirect_to:
            credentials["options"] = {"redirect_to": redirect_to}
        try:
            response = self.supabase.auth.sign_in_with_oauth(credentials)
        except Exception as e:
            logger.error(f"OAuth URL for {provider} failed: {e}")
            raise HTTPException(status_code=500, detail="Failed to start OAuth sign-in")
        return OAuthUrlResponse(provider=provider, url=response.url)

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """User behind a Supabase access token; lookups are cached briefly."""
        cached = token_cache.get(token)
        if cached is not None:
            return cached
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            if not _mentions(e, "jwt", "expired", "invalid"):
                logger.warning(f"Token lookup failed: {e}")
                raise HTTPException(status_code=401, detail="Authentication failed")
            raise HTTPException(status_code=401, detail="Invalid or expired token")

        if not user_response or not user_response.user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        user = _user_payload(user_response.user)
        token_cache.put(token, user)
        return user

    def logout(self, token: str) -> bool:
        token_cache.discard(token)
        try:
            # Access tokens stay valid until they expire; this only ends the refresh session
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False
