from fastapi import HTTPException
from supabase import create_client, Client
from typing import Optional
from app.config import settings


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Use for table access and background tasks."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    """Table and storage client for request handlers. 503 when Supabase is not configured."""
    if not settings.supabase_configured:
        raise HTTPException(status_code=503, detail="Database not configured")
    return SupabaseClient.get_service_client()


def get_auth_client() -> Client:
    """Anon-key client for Supabase Auth calls made on behalf of a user."""
    if not settings.supabase_url or not settings.supabase_key:
        raise HTTPException(status_code=503, detail="Authentication not configured")
    return SupabaseClient.get_client()


def get_optional_supabase() -> Optional[Client]:
    """Same client as get_supabase, or None for features where persistence is best-effort."""
    if not settings.supabase_configured:
        return None
    return SupabaseClient.get_service_client()
