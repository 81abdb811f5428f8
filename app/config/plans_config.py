"""
Subscription Plans Configuration
Plan catalogue shown on the pricing page and used to label subscription rows.
The premium Stripe price id comes from settings so each environment can use its own.
"""

from app.config.settings import settings

FREE_PLAN = "free"
PREMIUM_PLAN = "premium"

PLANS = {
    FREE_PLAN: {
        "name": "Free",
        "price": 0,
        "features": [
            "Weekly meal planning",
            "Basic recipes (15+)",
            "Grocery list generation",
            "Local storage sync",
        ],
    },
    PREMIUM_PLAN: {
        "name": "Premium",
        "price": 4.99,
        "features": [
            "Everything in Free",
            "Unlimited custom recipes",
            "Cloud sync across devices",
            "AI meal suggestions",
            "Nutritional tracking",
            "Family sharing (up to 5)",
            "Priority support",
        ],
    },
}

# One-time purchase offered by the plain checkout endpoint
ONE_TIME_PRODUCT = {
    "name": "Meal Planner Subscription",
    "currency": "usd",
    "unit_amount": 990,
}


def get_plans() -> dict:
    """Plan catalogue with the configured premium price id filled in"""
    plans = {key: dict(plan) for key, plan in PLANS.items()}
    plans[PREMIUM_PLAN]["price_id"] = settings.stripe_premium_price_id
    return plans
