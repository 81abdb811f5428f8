# Supabase tables: subscriptions, stripe_webhook_events
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py and event_store.py

"""
subscriptions - one row per user, written only by the Stripe webhook:
- id: uuid (primary key)
- user_id: text (unique, nullable) - app user id from checkout metadata
- email: text (nullable)
- stripe_customer_id: text (unique, nullable)
- stripe_subscription_id: text (nullable)
- status: text (not null, default 'inactive') - active, trialing, past_due, canceled, unpaid, incomplete, incomplete_expired, paused, inactive
- plan: text (not null, default 'free') - free, premium
- cancel_at_period_end: boolean (default false)
- current_period_end: timestamp (nullable)
- last_payment_at: timestamp (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

stripe_webhook_events - idempotency ledger, rows expire after webhook_event_ttl_hours:
- event_id: text (primary key) - Stripe event id (evt_...)
- event_type: text (not null)
- status: text (not null) - processing, processed
- received_at: timestamp (not null, default now())
- processed_at: timestamp (nullable)
"""
