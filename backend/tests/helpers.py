import hashlib
import hmac
import json
import time

import stripe

from checkout_bridge.core.config import Settings

WEBHOOK_SECRET = "whsec_test"


def stripe_header(body: bytes, secret: str = WEBHOOK_SECRET, timestamp=None) -> str:
    """Build a Stripe-Signature header the way Stripe signs deliveries."""
    ts = int(time.time()) if timestamp is None else timestamp
    payload = f"{ts}.{body.decode()}".encode("utf-8")
    sig = hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return f"t={ts},v1={sig}"


def event_body(event_type: str, obj=None, event_id: str = "evt_test_001") -> bytes:
    payload = {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": obj if obj is not None else {"id": "cs_test_123"}},
    }
    return json.dumps(payload, separators=(",", ":")).encode()


def make_event(event_type: str, obj=None) -> stripe.Event:
    body = event_body(event_type, obj)
    return signed_event(body)


def signed_event(body: bytes) -> stripe.Event:
    return stripe.Webhook.construct_event(body, stripe_header(body), WEBHOOK_SECRET)


def make_settings(**overrides) -> Settings:
    values = {
        "client_url": "http://localhost:3000",
        "stripe_secret_key": "sk_test_123",
        "stripe_publishable_key": "pk_test_123",
        "stripe_webhook_secret": WEBHOOK_SECRET,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)
