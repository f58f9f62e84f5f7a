import logging
from typing import Callable

import stripe

logger = logging.getLogger(__name__)


def _session_id(event: stripe.Event) -> str | None:
    data = getattr(event, "data", None)
    obj = getattr(data, "object", None)
    return getattr(obj, "id", None)


def handle_checkout_completed(event: stripe.Event) -> None:
    logger.info(f"Checkout completed: {_session_id(event)}")


def handle_checkout_expired(event: stripe.Event) -> None:
    logger.info(f"Checkout expired: {_session_id(event)}")


def handle_async_payment_succeeded(event: stripe.Event) -> None:
    logger.info(f"Delayed payment succeeded for checkout {_session_id(event)}")


def handle_async_payment_failed(event: stripe.Event) -> None:
    logger.warning(f"Delayed payment failed for checkout {_session_id(event)}")


EVENT_HANDLERS: dict[str, Callable[[stripe.Event], None]] = {
    "checkout.session.completed": handle_checkout_completed,
    "checkout.session.expired": handle_checkout_expired,
    "checkout.session.async_payment_succeeded": handle_async_payment_succeeded,
    "checkout.session.async_payment_failed": handle_async_payment_failed,
}


def dispatch(event: stripe.Event) -> bool:
    """
    Run the handler registered for the event type.

    Returns False for types with no handler; those are only logged. Nothing
    here deduplicates redelivered events, so the event id is always logged.
    """
    event_type = getattr(event, "type", None)
    logger.info(f"Dispatching event {getattr(event, 'id', None)} ({event_type})")
    handler = EVENT_HANDLERS.get(event_type)
    if handler is None:
        logger.info(f"Unhandled event type {event_type}")
        return False
    handler(event)
    return True
