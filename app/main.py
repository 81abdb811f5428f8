import asyncio
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.core.limiter import limiter
from app.modules.auth import routes as auth_routes
from app.modules.recipes import routes as recipes_routes
from app.modules.favorites import routes as favorites_routes
from app.modules.meal_plans import routes as meal_plans_routes
from app.modules.family_profiles import routes as family_profiles_routes
from app.modules.storage import routes as storage_routes
from app.modules.chef import routes as chef_routes
from app.modules.scanner import routes as scanner_routes
from app.modules.voice import routes as voice_routes
from app.modules.billing import routes as billing_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        message = str(errors[0].get("msg", message))
        # pydantic prefixes messages raised from validators
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
    return JSONResponse(status_code=500, content={"error": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api")
app.include_router(recipes_routes.router, prefix="/api")
app.include_router(favorites_routes.router, prefix="/api")
app.include_router(meal_plans_routes.router, prefix="/api")
app.include_router(family_profiles_routes.router, prefix="/api")
app.include_router(storage_routes.router, prefix="/api")
app.include_router(chef_routes.router, prefix="/api")
app.include_router(scanner_routes.router, prefix="/api")
app.include_router(voice_routes.router, prefix="/api")
app.include_router(billing_routes.router, prefix="/api")
app.include_router(billing_routes.checkout_router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")

    if settings.supabase_configured and settings.stripe_configured:
        from app.modules.billing.retention import webhook_retention_loop
        app.state.retention_task = asyncio.create_task(webhook_retention_loop())
        logger.info(
            f"Webhook retention started - purging events older than "
            f"{settings.webhook_event_ttl_hours}h every {settings.webhook_cleanup_interval_seconds}s"
        )


@app.on_event("shutdown")
async def shutdown_event():
    task = getattr(app.state, "retention_task", None)
    if task is not None:
        task.cancel()
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe listing which integrations are configured."""
    return {
        "status": "ready",
        "integrations": {
            "supabase": settings.supabase_configured,
            "stripe": settings.stripe_configured,
            "anthropic": bool(settings.anthropic_api_key),
            "elevenlabs": bool(settings.elevenlabs_api_key),
            "s3": settings.s3_configured,
        },
    }
