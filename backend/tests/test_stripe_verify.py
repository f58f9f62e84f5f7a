import time

import pytest

from checkout_bridge.services import stripe_verify
from checkout_bridge.services.stripe_verify import StripeSignatureError

from helpers import WEBHOOK_SECRET, event_body, stripe_header


def test_verify_returns_decoded_event():
    body = event_body("checkout.session.completed", {"id": "cs_test_42"})

    event = stripe_verify.verify(body, stripe_header(body), WEBHOOK_SECRET)

    assert event.id == "evt_test_001"
    assert event.type == "checkout.session.completed"
    assert event.data.object.id == "cs_test_42"


@pytest.mark.parametrize("header", [None, ""])
def test_missing_header(header):
    with pytest.raises(StripeSignatureError, match="Missing Stripe signature"):
        stripe_verify.verify(b"{}", header, WEBHOOK_SECRET)


@pytest.mark.parametrize("secret", [None, ""])
def test_missing_secret(secret):
    body = event_body("checkout.session.completed")
    with pytest.raises(StripeSignatureError, match="webhook secret"):
        stripe_verify.verify(body, stripe_header(body), secret)


def test_tampered_body():
    body = event_body("checkout.session.completed")
    header = stripe_header(body)
    with pytest.raises(StripeSignatureError):
        stripe_verify.verify(body + b" ", header, WEBHOOK_SECRET)


def test_timestamp_outside_tolerance():
    body = event_body("checkout.session.completed")
    header = stripe_header(body, timestamp=int(time.time()) - 120)
    with pytest.raises(StripeSignatureError):
        stripe_verify.verify(body, header, WEBHOOK_SECRET, tolerance=60)


def test_timestamp_inside_custom_tolerance():
    body = event_body("checkout.session.completed")
    header = stripe_header(body, timestamp=int(time.time()) - 120)

    event = stripe_verify.verify(body, header, WEBHOOK_SECRET, tolerance=600)

    assert event.type == "checkout.session.completed"


def test_signed_garbage_is_not_an_event():
    body = b"definitely not json"
    with pytest.raises(StripeSignatureError, match="Invalid payload"):
        stripe_verify.verify(body, stripe_header(body), WEBHOOK_SECRET)


@pytest.mark.parametrize("body", [b"[1,2]", b"42", b'"evt"', b"null"])
def test_signed_json_that_is_not_an_object(body):
    with pytest.raises(StripeSignatureError, match="Invalid payload"):
        stripe_verify.verify(body, stripe_header(body), WEBHOOK_SECRET)


def test_signed_object_without_type():
    body = b'{"id":"evt_no_type","object":"event"}'
    with pytest.raises(StripeSignatureError, match="Invalid payload"):
        stripe_verify.verify(body, stripe_header(body), WEBHOOK_SECRET)
