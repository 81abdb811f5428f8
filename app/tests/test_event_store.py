from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from app.modules.billing.event_store import STALE_CLAIM_SECONDS, WebhookEventStore
from app.modules.billing.retention import purge_expired_webhook_events


def _ago(**delta) -> str:
    return (datetime.now(timezone.utc) - timedelta(**delta)).isoformat()


@pytest.fixture
def store(fake_supabase):
    return WebhookEventStore(fake_supabase, ttl_hours=72, cache_size=2)


def test_first_claim_wins(store, fake_supabase):
    assert store.claim("evt_1", "invoice.paid") is True
    assert store.claim("evt_1", "invoice.paid") is False
    assert fake_supabase.tables["stripe_webhook_events"][0]["status"] == "processing"


def test_processed_event_is_not_claimed_again(store):
    store.claim("evt_1", "invoice.paid")
    store.mark_processed("evt_1")

    assert store.claim("evt_1", "invoice.paid") is False


def test_release_allows_retry(store, fake_supabase):
    store.claim("evt_1", "invoice.paid")
    store.release("evt_1")

    assert fake_supabase.tables["stripe_webhook_events"] == []
    assert store.claim("evt_1", "invoice.paid") is True


def test_release_keeps_processed_rows(store, fake_supabase):
    store.claim("evt_1", "invoice.paid")
    store.mark_processed("evt_1")
    store.release("evt_1")

    assert len(fake_supabase.tables["stripe_webhook_events"]) == 1


def test_stale_claim_is_taken_over(store, fake_supabase):
    fake_supabase.tables["stripe_webhook_events"] = [{
        "event_id": "evt_1",
        "event_type": "invoice.paid",
        "status": "processing",
        "received_at": _ago(seconds=STALE_CLAIM_SECONDS + 60),
    }]

    assert store.claim("evt_1", "invoice.paid") is True
    assert store.claim("evt_1", "invoice.paid") is False


def test_cache_is_bounded(store, fake_supabase):
    for event_id in ("evt_1", "evt_2", "evt_3"):
        store.claim(event_id, "invoice.paid")
        store.mark_processed(event_id)

    fake_supabase.errors["stripe_webhook_events"] = RuntimeError("db down")
    # evt_3 is still cached; evt_1 was evicted and needs the table
    assert store.claim("evt_3", "invoice.paid") is False
    with pytest.raises(RuntimeError):
        store.claim("evt_1", "invoice.paid")


def test_purge_expired(store, fake_supabase):
    fake_supabase.tables["stripe_webhook_events"] = [
        {"event_id": "old", "event_type": "invoice.paid", "status": "processed", "received_at": _ago(hours=100)},
        {"event_id": "new", "event_type": "invoice.paid", "status": "processed", "received_at": _ago(hours=1)},
    ]

    assert store.purge_expired() == 1
    assert [r["event_id"] for r in fake_supabase.tables["stripe_webhook_events"]] == ["new"]


@pytest.mark.asyncio
async def test_retention_job_purges(fake_supabase):
    fake_supabase.tables["stripe_webhook_events"] = [
        {"event_id": "old", "event_type": "invoice.paid", "status": "processed", "received_at": _ago(days=30)},
    ]
    with patch("app.modules.billing.retention.SupabaseClient.get_service_client", return_value=fake_supabase):
        removed = await purge_expired_webhook_events()

    assert removed == 1


@pytest.mark.asyncio
async def test_retention_job_swallows_errors(fake_supabase):
    fake_supabase.errors["stripe_webhook_events"] = RuntimeError("db down")
    with patch("app.modules.billing.retention.SupabaseClient.get_service_client", return_value=fake_supabase):
        assert await purge_expired_webhook_events() == 0
