import stripe
from supabase import Client
from app.config import settings
from app.config.plans_config import ONE_TIME_PRODUCT
from app.modules.billing.schemas import SubscriptionResponse
from typing import Optional, Dict, Any
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

TABLE = "subscriptions"


def require_stripe() -> None:
    """FastAPI dependency: 503 unless a Stripe secret key is configured; sets the module-level key."""
    if not settings.stripe_configured:
        raise HTTPException(status_code=503, detail="Stripe is not configured")
    stripe.api_key = settings.stripe_secret_key
    if settings.stripe_api_version:
        stripe.api_version = settings.stripe_api_version


class CheckoutService:
    """Stripe Checkout and Billing Portal sessions"""

    def create_subscription_checkout(
        self,
        price_id: str,
        origin: str,
        user_id: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Subscription checkout; the app user id rides along in session and subscription metadata."""
        metadata = {"userId": user_id or ""}
        params: Dict[str, Any] = {
            "mode": "subscription",
            "payment_method_types": ["card"],
            "line_items": [{"price": price_id, "quantity": 1}],
            "success_url": f"{origin}/pricing?success=true&session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{origin}/pricing?canceled=true",
            "metadata": metadata,
            "subscription_data": {"metadata": metadata},
        }
        if email:
            params["customer_email"] = email
        if user_id:
            params["client_reference_id"] = user_id
        try:
            session = stripe.checkout.Session.create(**params)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout error: {e}")
            raise HTTPException(status_code=500, detail="Failed to create checkout session")
        logger.info(f"Created subscription checkout session {session.id} for user {user_id or '-'}")
        return {"session_id": session.id, "url": session.url}

    def create_payment_checkout(self, origin: str, user_id: Optional[str] = None) -> Dict[str, Any]:
        """
        One-time payment checkout for the fixed-price product. Stripe always creates
        a customer so the completion event can be tied back to a subscription row.
        """
        params: Dict[str, Any] = {
            "payment_method_types": ["card"],
            "mode": "payment",
            "line_items": [{
                "price_data": {
                    "currency": ONE_TIME_PRODUCT["currency"],
                    "product_data": {"name": ONE_TIME_PRODUCT["name"]},
                    "unit_amount": ONE_TIME_PRODUCT["unit_amount"],
                },
                "quantity": 1,
            }],
            "success_url": f"{origin}/success",
            "cancel_url": f"{origin}/cancel",
            "customer_creation": "always",
            "metadata": {"userId": user_id or ""},
        }
        if user_id:
            params["client_reference_id"] = user_id
        try:
            session = stripe.checkout.Session.create(**params)
        except stripe.StripeError as e:
            logger.error(f"Checkout error: {e}")
            raise HTTPException(status_code=500, detail="Failed to create checkout session")
        return {"url": session.url}

    def create_portal_session(self, customer_id: str, return_url: str) -> str:
        try:
            session = stripe.billing_portal.Session.create(customer=customer_id, return_url=return_url)
        except stripe.StripeError as e:
            logger.error(f"Billing portal error: {e}")
            raise HTTPException(status_code=500, detail="Failed to create billing portal session")
        if not session.url:
            raise HTTPException(status_code=500, detail="Failed to create billing portal session")
        return session.url


class BillingService:
    """Subscription rows in Supabase"""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_subscription(self, user_id: str) -> SubscriptionResponse:
        """Stored subscription for user_id; users without a row are on the free plan."""
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching subscription for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch subscription")
        if not result or not result.data:
            return SubscriptionResponse(user_id=user_id)
        return SubscriptionResponse(**result.data)

    def apply_subscription_change(
        self,
        fields: Dict[str, Any],
        user_id: Optional[str] = None,
        customer_id: Optional[str] = None,
    ) -> Optional[SubscriptionResponse]:
        """
        Write subscription fields to the row keyed by app user id (upsert) or,
        when the event carries no user id, by Stripe customer id (update only).
        Returns None when no row could be keyed.
        """
        row = {**fields, "updated_at": datetime.now(timezone.utc).isoformat()}
        if customer_id:
            row["stripe_customer_id"] = customer_id

        if user_id:
            result = self.supabase.table(TABLE)\
                .upsert({**row, "user_id": user_id}, on_conflict="user_id")\
                .execute()
        elif customer_id:
            result = self.supabase.table(TABLE)\
                .update(row)\
                .eq("stripe_customer_id", customer_id)\
                .execute()
        else:
            logger.warning(f"Subscription change without user or customer id ignored: {sorted(fields)}")
            return None

        if not result.data:
            logger.warning(f"No subscription row for customer {customer_id}; change not applied")
            return None
        return SubscriptionResponse(**result.data[0])
