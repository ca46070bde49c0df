"""
Error tracking via Sentry.

Sentry is initialised once per Lambda container when SENTRY_DSN is set.
Without a DSN the capture functions are no-ops, so callers never need to
check whether tracking is enabled.
"""

import logging
import os
from typing import Optional

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

logger = logging.getLogger(__name__)

FLUSH_TIMEOUT_SECONDS = 2.0


def init_sentry(dsn: Optional[str] = None, environment: Optional[str] = None) -> bool:
    """
    Initialise the Sentry SDK.

    Args:
        dsn: Sentry DSN (defaults to SENTRY_DSN)
        environment: Sentry environment (defaults to APP_ENV, then "prod")

    Returns:
        bool: True if Sentry was initialised
    """
    dsn = dsn or os.environ.get('SENTRY_DSN')
    if not dsn:
        logger.info("SENTRY_DSN not set, error tracking disabled")
        return False

    # Log records become breadcrumbs only; events are captured explicitly
    sentry_logging = LoggingIntegration(level=logging.INFO, event_level=None)

    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=environment or os.environ.get('APP_ENV', 'prod'),
            integrations=[sentry_logging],
        )
    except Exception as e:
        logger.warning(f"sentry_sdk.init failure: {e}")
        return False

    logger.info("Sentry error tracking initialised")
    return True


class SentryErrorTracker:
    """Fire-and-forget reporting of scanner errors to Sentry."""

    def capture_exception(self, error: BaseException) -> None:
        sentry_sdk.capture_exception(error)

    def capture_message(self, message: str) -> None:
        sentry_sdk.capture_message(message, level='error')

    def flush(self) -> None:
        sentry_sdk.flush(timeout=FLUSH_TIMEOUT_SECONDS)
