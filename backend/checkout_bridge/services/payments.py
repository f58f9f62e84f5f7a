import logging
from typing import Protocol

import stripe

from checkout_bridge.core.config import Settings
from checkout_bridge.schemas.checkout import (
    CheckoutSession,
    LineItem,
    SessionDescriptor,
)
from checkout_bridge.services import stripe_verify

logger = logging.getLogger(__name__)

# Stripe substitutes the real id into this placeholder on redirect
SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"

PRODUCT = LineItem(
    currency="usd",
    product_name="Pro Subscription",
    unit_amount=2000,
    quantity=1,
)


class PaymentProviderError(Exception):
    """The payment provider rejected or failed a request."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PaymentProvider(Protocol):
    def create_session(self, descriptor: SessionDescriptor) -> CheckoutSession: ...

    def verify_webhook(
        self, payload: bytes, signature: str | None, secret: str | None
    ) -> stripe.Event: ...


def build_session_descriptor(settings: Settings) -> SessionDescriptor:
    base = settings.base_url
    return SessionDescriptor(
        line_items=(PRODUCT,),
        success_url=f"{base}/public/success.html?session_id={SESSION_ID_PLACEHOLDER}",
        cancel_url=f"{base}/public/cancel.html",
    )


class StripeProvider:
    """Talks to Stripe with an explicit key instead of the global stripe.api_key."""

    def __init__(
        self,
        api_key: str,
        api_version: str | None = None,
        webhook_tolerance: int = stripe_verify.DEFAULT_TOLERANCE,
    ):
        self.api_key = api_key
        self.api_version = api_version
        self.webhook_tolerance = webhook_tolerance

    @classmethod
    def from_settings(cls, settings: Settings) -> "StripeProvider":
        return cls(
            api_key=settings.secret_key,
            api_version=settings.stripe_api_version,
            webhook_tolerance=settings.stripe_webhook_tolerance,
        )

    def create_session(self, descriptor: SessionDescriptor) -> CheckoutSession:
        params = descriptor.to_stripe()
        if self.api_version:
            params["stripe_version"] = self.api_version
        try:
            session = stripe.checkout.Session.create(api_key=self.api_key, **params)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed: {e}")
            raise PaymentProviderError(
                e.user_message or str(e) or "Internal Server Error"
            ) from e

        logger.info(f"Created checkout session {session.id}")
        return CheckoutSession(id=session.id, url=session.url)

    def verify_webhook(
        self, payload: bytes, signature: str | None, secret: str | None
    ) -> stripe.Event:
        return stripe_verify.verify(
            raw_body=payload,
            header=signature,
            secret=secret,
            tolerance=self.webhook_tolerance,
        )
