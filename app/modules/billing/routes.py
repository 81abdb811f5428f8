from fastapi import APIRouter, Depends, HTTPException, Request
from app.config import settings
from app.config.plans_config import get_plans
from app.core.dependencies import ANONYMOUS_USER_ID, get_request_user_id
from app.core.limiter import limiter
from app.database.supabase_client import get_supabase
from app.modules.billing.schemas import (
    CheckoutRequest, CheckoutResponse, PaymentCheckoutResponse, PortalRequest, PortalResponse,
    PlansResponse, SubscriptionResponse, WebhookResponse
)
from app.modules.billing.service import BillingService, CheckoutService, require_stripe
from app.modules.billing.webhook import WebhookProcessor, verify_event
from supabase import Client
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stripe", tags=["billing"])
checkout_router = APIRouter(prefix="/checkout", tags=["billing"])


def get_checkout_service(_: None = Depends(require_stripe)) -> CheckoutService:
    return CheckoutService()


def get_billing_service(supabase: Client = Depends(get_supabase)) -> BillingService:
    return BillingService(supabase)


def get_origin(request: Request) -> str:
    """Base URL of the web app for Stripe redirects"""
    if settings.public_base_url:
        return settings.public_base_url.rstrip("/")
    origin = request.headers.get("origin")
    if origin:
        return origin.rstrip("/")
    return str(request.base_url).rstrip("/")


@router.get("/checkout", response_model=PlansResponse)
async def list_plans():
    """Plan catalogue"""
    return PlansResponse(plans=get_plans())


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout(
    checkout_request: CheckoutRequest,
    request: Request,
    service: CheckoutService = Depends(get_checkout_service)
):
    """Start a subscription checkout"""
    if not checkout_request.price_id:
        raise HTTPException(status_code=400, detail="Price ID is required")
    return service.create_subscription_checkout(
        checkout_request.price_id,
        get_origin(request),
        user_id=checkout_request.user_id,
        email=checkout_request.email,
    )


@checkout_router.post("", response_model=PaymentCheckoutResponse)
async def create_payment_checkout(
    request: Request,
    user_id: str = Depends(get_request_user_id),
    service: CheckoutService = Depends(get_checkout_service)
):
    """Start a one-time payment checkout"""
    owner = None if user_id == ANONYMOUS_USER_ID else user_id
    return service.create_payment_checkout(get_origin(request), user_id=owner)


@router.post("/portal", response_model=PortalResponse)
async def create_portal_session(
    portal_request: PortalRequest,
    request: Request,
    service: CheckoutService = Depends(get_checkout_service)
):
    """Open the Stripe billing portal for a customer"""
    if not portal_request.customer_id:
        raise HTTPException(status_code=400, detail="Customer ID is required")
    url = service.create_portal_session(portal_request.customer_id, f"{get_origin(request)}/pricing")
    return PortalResponse(url=url)


@router.get("/subscription", response_model=SubscriptionResponse)
async def get_subscription(
    user_id: str = Depends(get_request_user_id),
    service: BillingService = Depends(get_billing_service)
):
    """Subscription state of the requesting user"""
    return service.get_subscription(user_id)


@router.post("/webhook", response_model=WebhookResponse)
@limiter.exempt
async def stripe_webhook(
    request: Request,
    _: None = Depends(require_stripe),
    supabase: Client = Depends(get_supabase)
):
    """Stripe event receiver"""
    if not settings.stripe_webhook_secret:
        logger.error("Missing STRIPE_WEBHOOK_SECRET")
        raise HTTPException(status_code=500, detail="Webhook secret not configured")

    payload = await request.body()
    event = verify_event(payload, request.headers.get("stripe-signature"), settings.stripe_webhook_secret)
    processor = WebhookProcessor(supabase)
    return processor.process(event)
