from app.modules.billing.service import BillingService
from app.modules.billing.webhook_handlers import EVENT_HANDLERS, dispatch_event


def _event(event_type, obj):
    return {"id": "evt_x", "type": event_type, "data": {"object": obj}}


def test_all_reconciled_event_types_have_handlers():
    assert set(EVENT_HANDLERS) == {
        "checkout.session.completed",
        "customer.subscription.updated",
        "customer.subscription.deleted",
        "invoice.paid",
        "invoice.payment_failed",
        "charge.succeeded",
    }


def test_unknown_type_is_not_dispatched(fake_supabase):
    assert dispatch_event(_event("payment_intent.created", {}), BillingService(fake_supabase)) is False


def test_subscription_metadata_creates_row(fake_supabase):
    billing = BillingService(fake_supabase)

    dispatch_event(_event("customer.subscription.updated", {
        "id": "sub_1",
        "customer": "cus_1",
        "status": "trialing",
        "metadata": {"userId": "user-9"},
        "current_period_end": 1767225600,
    }), billing)

    row = fake_supabase.tables["subscriptions"][0]
    assert row["user_id"] == "user-9"
    assert row["status"] == "trialing"
    assert row["plan"] == "premium"


def test_expired_subscription_drops_to_free(fake_supabase):
    fake_supabase.tables["subscriptions"] = [{"id": "r", "user_id": "u", "stripe_customer_id": "cus_1", "plan": "premium"}]

    dispatch_event(_event("customer.subscription.updated", {
        "id": "sub_1", "customer": "cus_1", "status": "incomplete_expired",
    }), BillingService(fake_supabase))

    assert fake_supabase.tables["subscriptions"][0]["plan"] == "free"


def test_invoice_paid_uses_subscription_details(fake_supabase):
    dispatch_event(_event("invoice.paid", {
        "id": "in_1",
        "customer": "cus_1",
        "status_transitions": {"paid_at": 1767225600},
        "parent": {"subscription_details": {"metadata": {"userId": "user-3"}}},
    }), BillingService(fake_supabase))

    row = fake_supabase.tables["subscriptions"][0]
    assert row["user_id"] == "user-3"
    assert row["status"] == "active"
    assert row["last_payment_at"].startswith("2026-01-01")


def test_one_time_checkout_without_user_updates_customer_row(fake_supabase):
    fake_supabase.tables["subscriptions"] = [{"id": "r", "user_id": "u", "stripe_customer_id": "cus_1", "plan": "free"}]

    dispatch_event(_event("checkout.session.completed", {
        "id": "cs_1", "mode": "payment", "customer": {"id": "cus_1"},
    }), BillingService(fake_supabase))

    assert fake_supabase.tables["subscriptions"][0]["plan"] == "premium"


def test_charge_without_customer_is_ignored(fake_supabase):
    assert dispatch_event(_event("charge.succeeded", {"id": "ch_1"}), BillingService(fake_supabase)) is True
    assert "subscriptions" not in fake_supabase.tables


def test_change_without_any_key_writes_nothing(fake_supabase):
    result = BillingService(fake_supabase).apply_subscription_change({"status": "active"})

    assert result is None
    assert "subscriptions" not in fake_supabase.tables


def test_one_time_checkout_with_user_marks_premium(fake_supabase):
    dispatch_event(_event("checkout.session.completed", {
        "id": "cs_2", "mode": "payment", "customer": "cus_9", "metadata": {"userId": "user-9"},
    }), BillingService(fake_supabase))

    row = fake_supabase.tables["subscriptions"][0]
    assert row["user_id"] == "user-9"
    assert row["stripe_customer_id"] == "cus_9"
    assert row["plan"] == "premium"
