"""
Stripe event handlers. Each one maps a billing lifecycle event onto the
subscriptions table through BillingService.apply_subscription_change.
"""
from app.config.plans_config import FREE_PLAN, PREMIUM_PLAN
from app.modules.billing.service import BillingService
from typing import Callable, Dict, Any, Optional
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

# Subscription statuses that no longer grant premium features
ENDED_STATUSES = ("canceled", "incomplete_expired")


def _metadata_user_id(obj: Dict[str, Any]) -> Optional[str]:
    return ((obj.get("metadata") or {}).get("userId") or "").strip() or None


def _customer_id(obj: Dict[str, Any]) -> Optional[str]:
    customer = obj.get("customer")
    if isinstance(customer, dict):
        return customer.get("id")
    return customer or None


def _timestamp(epoch: Optional[int]) -> Optional[str]:
    if not epoch:
        return None
    return datetime.fromtimestamp(int(epoch), tz=timezone.utc).isoformat()


def _current_period_end(subscription: Dict[str, Any]) -> Optional[str]:
    # Newer API versions moved the period onto subscription items
    epoch = subscription.get("current_period_end")
    if not epoch:
        items = (subscription.get("items") or {}).get("data") or []
        epoch = items[0].get("current_period_end") if items else None
    return _timestamp(epoch)


def _invoice_user_id(invoice: Dict[str, Any]) -> Optional[str]:
    details = invoice.get("subscription_details") \
        or ((invoice.get("parent") or {}).get("subscription_details")) \
        or {}
    return _metadata_user_id(details)


def handle_checkout_completed(obj: Dict[str, Any], billing: BillingService) -> None:
    user_id = _metadata_user_id(obj) or obj.get("client_reference_id") or None
    customer_id = _customer_id(obj)
    fields: Dict[str, Any] = {"status": "active", "plan": PREMIUM_PLAN}
    if obj.get("subscription"):
        fields["stripe_subscription_id"] = obj["subscription"]
    email = obj.get("customer_email") or (obj.get("customer_details") or {}).get("email")
    if email:
        fields["email"] = email
    logger.info(f"Checkout completed: user={user_id} customer={customer_id} mode={obj.get('mode')}")
    billing.apply_subscription_change(fields, user_id=user_id, customer_id=customer_id)


def handle_subscription_updated(obj: Dict[str, Any], billing: BillingService) -> None:
    status = obj.get("status") or "inactive"
    fields = {
        "status": status,
        "plan": FREE_PLAN if status in ENDED_STATUSES else PREMIUM_PLAN,
        "stripe_subscription_id": obj.get("id"),
        "cancel_at_period_end": bool(obj.get("cancel_at_period_end")),
        "current_period_end": _current_period_end(obj),
    }
    logger.info(f"Subscription updated: {obj.get('id')} status={status} cancel_at_period_end={fields['cancel_at_period_end']}")
    billing.apply_subscription_change(fields, user_id=_metadata_user_id(obj), customer_id=_customer_id(obj))


def handle_subscription_deleted(obj: Dict[str, Any], billing: BillingService) -> None:
    fields = {
        "status": "canceled",
        "plan": FREE_PLAN,
        "cancel_at_period_end": False,
    }
    logger.info(f"Subscription canceled: {obj.get('id')}")
    billing.apply_subscription_change(fields, user_id=_metadata_user_id(obj), customer_id=_customer_id(obj))


def handle_invoice_paid(obj: Dict[str, Any], billing: BillingService) -> None:
    paid_at = _timestamp((obj.get("status_transitions") or {}).get("paid_at")) \
        or datetime.now(timezone.utc).isoformat()
    fields = {"status": "active", "plan": PREMIUM_PLAN, "last_payment_at": paid_at}
    logger.info(f"Invoice paid for customer {_customer_id(obj)}")
    billing.apply_subscription_change(fields, user_id=_invoice_user_id(obj), customer_id=_customer_id(obj))


def handle_invoice_payment_failed(obj: Dict[str, Any], billing: BillingService) -> None:
    logger.warning(f"Payment failed for customer {_customer_id(obj)}")
    billing.apply_subscription_change(
        {"status": "past_due"}, user_id=_invoice_user_id(obj), customer_id=_customer_id(obj)
    )


def handle_charge_succeeded(obj: Dict[str, Any], billing: BillingService) -> None:
    customer_id = _customer_id(obj)
    if not customer_id:
        logger.info(f"Charge {obj.get('id')} has no customer; nothing to record")
        return
    billing.apply_subscription_change(
        {"last_payment_at": _timestamp(obj.get("created")) or datetime.now(timezone.utc).isoformat()},
        customer_id=customer_id,
    )


EVENT_HANDLERS: Dict[str, Callable[[Dict[str, Any], BillingService], None]] = {
    "checkout.session.completed": handle_checkout_completed,
    "customer.subscription.updated": handle_subscription_updated,
    "customer.subscription.deleted": handle_subscription_deleted,
    "invoice.paid": handle_invoice_paid,
    "invoice.payment_failed": handle_invoice_payment_failed,
    "charge.succeeded": handle_charge_succeeded,
}


def dispatch_event(event: Dict[str, Any], billing: BillingService) -> bool:
    """Run the handler for event["type"]. False when the type is not handled."""
    handler = EVENT_HANDLERS.get(event.get("type"))
    if handler is None:
        logger.info(f"Unhandled event type: {event.get('type')}")
        return False
    handler((event.get("data") or {}).get("object") or {}, billing)
    return True
