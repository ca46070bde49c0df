"""
AWS Lambda handler for the scheduled Cloudflare DNS scan.

Thin orchestration layer that loads the scanner configuration and delegates
to AlertRunner.
Policy: Only a configuration load failure fails the invocation. Alert, zone
and recipient errors are logged, emailed and sent to Sentry.
"""

import logging
import os
from typing import Dict, Any

from domain.alert_runner import AlertRunner
from domain.errors import ConfigLoadError
from domain.models import STATUS_INVALID, STATUS_NO_MATCHES, STATUS_NOTIFIED, STATUS_SCAN_FAILED
from domain.notifier import Notifier
from domain.zone_scanner import ZoneScanner
from integrations.cloudflare import CloudflareClient
from integrations import error_tracking
from services import appconfig as appconfig_service
from services import ses as ses_service

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())

# Add console handler for local testing (AWS Lambda provides handlers automatically)
if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    formatter = logging.Formatter('%(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

# Initialize Sentry once at module level (reused across invocations)
error_tracking.init_sentry()
error_tracker = error_tracking.SentryErrorTracker()


def build_runner() -> AlertRunner:
    """Wire the scanner pipeline for one invocation."""
    notifier = Notifier(send_email=ses_service.send_email, error_tracker=error_tracker)
    scanner = ZoneScanner(provider_factory=CloudflareClient, notifier=notifier)
    return AlertRunner(scanner=scanner, notifier=notifier, environ=dict(os.environ))


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Scan the configured Cloudflare zones and email the reports.

    Args:
        event: Scheduled event (ignored)
        context: Lambda context

    Returns:
        Dict summarising the run (see RunOutcome.to_dict)

    Raises:
        ConfigLoadError: If the scanner configuration cannot be loaded
    """
    logger.info("=" * 70)
    logger.info("Cloudflare Scanner - Started")
    logger.info("=" * 70)

    try:
        try:
            config = appconfig_service.load_scanner_config()
        except ConfigLoadError as e:
            logger.error(f"Could not load scanner configuration: {e}")
            error_tracker.capture_exception(e)
            raise

        outcome = build_runner().run(config)
    finally:
        error_tracker.flush()

    # Log summary
    logger.info("=" * 70)
    logger.info(f"Scan complete: {len(outcome.alerts)} alert(s)")
    for status in (STATUS_NOTIFIED, STATUS_NO_MATCHES, STATUS_INVALID, STATUS_SCAN_FAILED):
        logger.info(f"  {status}: {outcome.count(status)}")
    logger.info("=" * 70)

    return outcome.to_dict()
