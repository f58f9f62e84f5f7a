import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from checkout_bridge.core.config import Settings, get_settings
from checkout_bridge.middleware.body_size import BodySizeLimitMiddleware
from checkout_bridge.schemas.checkout import (
    CheckoutError,
    CheckoutSession,
    PublicConfig,
    WebhookAck,
)
from checkout_bridge.services import events
from checkout_bridge.services.payments import (
    PaymentProvider,
    PaymentProviderError,
    StripeProvider,
    build_session_descriptor,
)
from checkout_bridge.services.stripe_verify import (
    SIGNATURE_HEADER,
    StripeSignatureError,
)

logger = logging.getLogger(__name__)

PUBLIC_DIR = Path(__file__).resolve().parent / "public"

router = APIRouter()


# ---------- dependencies ----------
def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_payment_provider(request: Request) -> PaymentProvider:
    return request.app.state.provider


# ---------- static ----------
@router.get("/", include_in_schema=False)
async def index():
    return FileResponse(PUBLIC_DIR / "index.html")


@router.get("/health", include_in_schema=False)
async def health(settings: Settings = Depends(get_app_settings)):
    # Only report whether keys are present, never their values
    return {
        "status": "ok",
        "stripe": {
            "secret_key_configured": bool(settings.stripe_secret_key),
            "publishable_key_configured": bool(settings.stripe_publishable_key),
            "webhook_secret_configured": bool(settings.stripe_webhook_secret),
        },
    }


# ---------- config ----------
@router.get("/config", response_model=PublicConfig)
async def public_config(settings: Settings = Depends(get_app_settings)):
    return PublicConfig(publishableKey=settings.publishable_key)


# ---------- checkout ----------
@router.post(
    "/create-checkout-session",
    response_model=CheckoutSession,
    responses={500: {"model": CheckoutError}},
)
async def create_checkout_session(
    settings: Settings = Depends(get_app_settings),
    provider: PaymentProvider = Depends(get_payment_provider),
):
    descriptor = build_session_descriptor(settings)
    try:
        return await run_in_threadpool(provider.create_session, descriptor)
    except PaymentProviderError as e:
        return JSONResponse(status_code=500, content={"error": e.message})


# ---------- webhook ----------
@router.post("/webhook", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    provider: PaymentProvider = Depends(get_payment_provider),
):
    # The signature covers the exact bytes Stripe sent, so read them unparsed
    raw = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)

    try:
        event = provider.verify_webhook(raw, signature, settings.stripe_webhook_secret)
    except StripeSignatureError as e:
        logger.error(f"Webhook signature verification failed. {e}")
        return PlainTextResponse(f"Webhook Error: {e}", status_code=400)

    # Verified deliveries are always acknowledged so Stripe stops retrying
    try:
        events.dispatch(event)
    except Exception:
        logger.exception(f"Handler failed for event {getattr(event, 'id', None)}")
    return WebhookAck(received=True)


def create_app(
    settings: Settings | None = None, provider: PaymentProvider | None = None
) -> FastAPI:
    settings = settings or get_settings()
    provider = provider or StripeProvider.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings.report_missing()
        yield

    app = FastAPI(
        title="Checkout Bridge",
        description="Issues Stripe Checkout sessions and receives Stripe webhooks",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.provider = provider

    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.max_body_size)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Server listening on http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
