import stripe
from supabase import Client
from fastapi import HTTPException
from app.modules.billing.event_store import WebhookEventStore
from app.modules.billing.service import BillingService
from app.modules.billing.webhook_handlers import dispatch_event
from app.modules.billing.schemas import WebhookResponse
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

SIGNATURE_TOLERANCE_SECONDS = 300


def verify_event(payload: bytes, signature: Optional[str], secret: str) -> Dict[str, Any]:
    """Check the Stripe-Signature header and return the decoded event as a plain dict."""
    if not signature:
        raise HTTPException(status_code=400, detail="Missing stripe-signature header")
    try:
        event = stripe.Webhook.construct_event(payload, signature, secret, SIGNATURE_TOLERANCE_SECONDS).to_dict()
    except ValueError as e:
        logger.error(f"Invalid Stripe webhook payload: {e}")
        raise HTTPException(status_code=400, detail="Invalid payload")
    except stripe.SignatureVerificationError as e:
        logger.error(f"Webhook signature verification failed: {e}")
        raise HTTPException(status_code=400, detail="Invalid signature")
    if not event.get("id") or not event.get("type"):
        raise HTTPException(status_code=400, detail="Invalid payload")
    return event


class WebhookProcessor:
    def __init__(self, supabase: Client, event_store: Optional[WebhookEventStore] = None):
        self.billing = BillingService(supabase)
        self.event_store = event_store or WebhookEventStore(supabase)

    def process(self, event: Dict[str, Any]) -> WebhookResponse:
        """
        Handle a verified event at most once. A handler failure releases the claim
        and answers 500 so Stripe redelivers the event.
        """
        event_id, event_type = event["id"], event["type"]
        try:
            claimed = self.event_store.claim(event_id, event_type)
        except Exception as e:
            logger.error(f"Could not claim webhook event {event_id}: {e}")
            raise HTTPException(status_code=500, detail="Webhook handler failed")
        if not claimed:
            logger.info(f"Duplicate webhook event {event_id} ({event_type}) skipped")
            return WebhookResponse(received=True, duplicate=True)

        try:
            dispatch_event(event, self.billing)
        except Exception as e:
            logger.exception(f"Webhook handler error for {event_id} ({event_type}): {e}")
            self.event_store.release(event_id)
            raise HTTPException(status_code=500, detail="Webhook handler failed")

        try:
            self.event_store.mark_processed(event_id)
        except Exception as e:
            # Handlers write absolute values, so a redelivery re-applies the same state
            logger.error(f"Failed to mark webhook event {event_id} processed: {e}")
        return WebhookResponse(received=True)
