from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime


class CheckoutRequest(BaseModel):
    price_id: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None


class CheckoutResponse(BaseModel):
    session_id: str
    url: Optional[str] = None


class PaymentCheckoutResponse(BaseModel):
    url: Optional[str] = None


class PortalRequest(BaseModel):
    customer_id: Optional[str] = None


class PortalResponse(BaseModel):
    url: str


class PlansResponse(BaseModel):
    plans: Dict[str, Dict[str, Any]]


class SubscriptionResponse(BaseModel):
    user_id: Optional[str] = None
    stripe_customer_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    status: str = "inactive"
    plan: str = "free"
    cancel_at_period_end: bool = False
    current_period_end: Optional[datetime] = None
    last_payment_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WebhookResponse(BaseModel):
    received: bool = True
    duplicate: bool = Field(default=False)
