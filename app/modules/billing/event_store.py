"""
Idempotency ledger for Stripe webhook events.

The Supabase table is the source of truth, so duplicates are caught across
replicas and restarts. A bounded in-process cache of recently processed ids
answers repeat deliveries without a round trip.
"""
import threading
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from typing import Optional
from supabase import Client
from app.config import settings
import logging

logger = logging.getLogger(__name__)

TABLE = "stripe_webhook_events"
STATUS_PROCESSING = "processing"
STATUS_PROCESSED = "processed"

# A "processing" claim older than this is treated as abandoned by a crashed worker
STALE_CLAIM_SECONDS = 600

_lock = threading.Lock()
_processed_cache: "OrderedDict[str, datetime]" = OrderedDict()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_ts(value) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def clear_cache() -> None:
    with _lock:
        _processed_cache.clear()


class WebhookEventStore:
    def __init__(
        self,
        supabase: Client,
        ttl_hours: Optional[int] = None,
        cache_size: Optional[int] = None,
    ):
        self.supabase = supabase
        self.ttl = timedelta(hours=ttl_hours if ttl_hours is not None else settings.webhook_event_ttl_hours)
        self.cache_size = cache_size if cache_size is not None else settings.webhook_cache_size

    def _seen_recently(self, event_id: str) -> bool:
        with _lock:
            processed_at = _processed_cache.get(event_id)
            if processed_at is None:
                return False
            if _now() - processed_at > self.ttl:
                del _processed_cache[event_id]
                return False
            _processed_cache.move_to_end(event_id)
            return True

    def _remember(self, event_id: str) -> None:
        with _lock:
            _processed_cache[event_id] = _now()
            _processed_cache.move_to_end(event_id)
            while len(_processed_cache) > self.cache_size:
                _processed_cache.popitem(last=False)

    def claim(self, event_id: str, event_type: str) -> bool:
        """
        Reserve event_id for processing. True when this caller owns the event;
        False when it was already processed or another worker is processing it.
        """
        if self._seen_recently(event_id):
            return False

        received_at = _now().isoformat()
        result = self.supabase.table(TABLE)\
            .upsert({
                "event_id": event_id,
                "event_type": event_type,
                "status": STATUS_PROCESSING,
                "received_at": received_at,
            }, on_conflict="event_id", ignore_duplicates=True)\
            .execute()
        if result.data:
            return True

        existing = self.supabase.table(TABLE)\
            .select("*")\
            .eq("event_id", event_id)\
            .maybe_single()\
            .execute()
        row = existing.data if existing else None
        if not row:
            # Purged between the insert and the read; let Stripe retry
            return False
        if row.get("status") == STATUS_PROCESSED:
            self._remember(event_id)
            return False

        claimed_at = _parse_ts(row.get("received_at"))
        if claimed_at and _now() - claimed_at > timedelta(seconds=STALE_CLAIM_SECONDS):
            # Take over only if nobody else refreshed the claim meanwhile
            takeover = self.supabase.table(TABLE)\
                .update({"received_at": received_at})\
                .eq("event_id", event_id)\
                .eq("status", STATUS_PROCESSING)\
                .eq("received_at", row.get("received_at"))\
                .execute()
            if takeover.data:
                logger.warning(f"Took over stale claim for webhook event {event_id}")
                return True
        return False

    def mark_processed(self, event_id: str) -> None:
        self.supabase.table(TABLE)\
            .update({"status": STATUS_PROCESSED, "processed_at": _now().isoformat()})\
            .eq("event_id", event_id)\
            .execute()
        self._remember(event_id)

    def release(self, event_id: str) -> None:
        """Drop a processing claim so the next delivery of the event is handled again."""
        try:
            self.supabase.table(TABLE)\
                .delete()\
                .eq("event_id", event_id)\
                .eq("status", STATUS_PROCESSING)\
                .execute()
        except Exception as e:
            logger.error(f"Failed to release claim for webhook event {event_id}: {e}")

    def purge_expired(self) -> int:
        """Delete ledger rows older than the TTL; returns how many were removed."""
        cutoff = (_now() - self.ttl).isoformat()
        result = self.supabase.table(TABLE)\
            .delete()\
            .lt("received_at", cutoff)\
            .execute()
        return len(result.data or [])
