import logging

import stripe

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Stripe-Signature"
DEFAULT_TOLERANCE = 300


class StripeSignatureError(Exception):
    pass


def verify(
    raw_body: bytes,
    header: str | None,
    secret: str | None,
    tolerance: int = DEFAULT_TOLERANCE,
) -> stripe.Event:
    """
    Check the Stripe-Signature header against the untouched request body and
    return the decoded event.

    Raise StripeSignatureError if the header or secret is missing, the
    signature or timestamp does not verify, or the signed body is not a JSON
    object carrying an event type.
    Nothing is decoded before the header and secret have been checked.
    """
    if not header or not secret:
        raise StripeSignatureError("Missing Stripe signature or webhook secret")

    try:
        event = stripe.Webhook.construct_event(
            raw_body, header, secret, tolerance=tolerance
        )
    except stripe.SignatureVerificationError as e:
        raise StripeSignatureError(e.user_message or str(e)) from e
    except (ValueError, AttributeError, TypeError) as e:
        # Signature matched but the body is not a JSON object
        raise StripeSignatureError(f"Invalid payload: {e}") from e

    event_type = getattr(event, "type", None)
    if not isinstance(event_type, str):
        raise StripeSignatureError("Invalid payload: event has no type")

    logger.info(
        f"Verified Stripe event {getattr(event, 'id', None)} of type {event_type}"
    )
    return event
