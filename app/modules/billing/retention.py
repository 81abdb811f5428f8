import asyncio
import logging
from app.config import settings
from app.database.supabase_client import SupabaseClient
from app.modules.billing.event_store import WebhookEventStore

logger = logging.getLogger(__name__)


async def purge_expired_webhook_events() -> int:
    """Delete idempotency rows older than the configured TTL."""
    try:
        store = WebhookEventStore(SupabaseClient.get_service_client())
        removed = store.purge_expired()
        if removed:
            logger.info(f"Purged {removed} expired webhook event record(s)")
        else:
            logger.debug("No expired webhook event records")
        return removed
    except Exception as e:
        logger.error(f"Error purging webhook events: {str(e)}")
        return 0


async def webhook_retention_loop():
    """Background task that periodically purges expired webhook event records"""
    while True:
        await purge_expired_webhook_events()
        await asyncio.sleep(settings.webhook_cleanup_interval_seconds)
