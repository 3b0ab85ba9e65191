"""Event capture through the Sentry SDK."""

from __future__ import annotations

import logging
from typing import Optional

import sentry_sdk

logger = logging.getLogger(__name__)

EVENT_SOURCE = "autoassign"


def init_event_capture(dsn: str, release: Optional[str] = None) -> None:
    """Point the Sentry SDK at the given DSN.

    Only explicit test events are sent; logging and framework integrations
    stay off.
    """
    sentry_sdk.init(
        dsn=dsn,
        release=release,
        default_integrations=False,
        auto_enabling_integrations=False,
    )
    logger.info("Event capture initialised")


def capture_test_event(culprit: str) -> Optional[str]:
    """Send a message event tagged with this relay as its source."""
    return sentry_sdk.capture_message(culprit, tags={"source": EVENT_SOURCE})
