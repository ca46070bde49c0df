"""
Alert orchestration - validate, scan and notify for every configured alert.

A failure in one alert (validation, scan or delivery) is logged and reported
but never prevents the following alerts from running.
"""

import logging
from typing import Mapping

from .errors import ValidationError
from .models import (
    Alert,
    AlertOutcome,
    RunOutcome,
    ScannerConfig,
    STATUS_INVALID,
    STATUS_NO_MATCHES,
    STATUS_NOTIFIED,
    STATUS_SCAN_FAILED,
)
from .notifier import Notifier
from .validation import validate
from .zone_scanner import ZoneScanner

logger = logging.getLogger(__name__)


class AlertRunner:
    """
    Runs every alert of a scanner configuration in order.

    Args:
        scanner: ZoneScanner used for each alert
        notifier: Notifier used for reports and error reports
        environ: Environment mapping used as a fallback for alert fields
    """

    def __init__(self, scanner: ZoneScanner, notifier: Notifier, environ: Mapping[str, str]):
        self.scanner = scanner
        self.notifier = notifier
        self.environ = environ

    def run(self, config: ScannerConfig) -> RunOutcome:
        """
        Run all alerts.

        Args:
            config: Scanner configuration loaded for this invocation

        Returns:
            RunOutcome with one AlertOutcome per alert
        """
        outcome = RunOutcome()

        for alert in config.alerts:
            result = self.run_alert(alert, config)
            outcome.alerts.append(result)
            logger.info(f"Alert finished: {result!r}")

        return outcome

    def run_alert(self, alert: Alert, config: ScannerConfig) -> AlertOutcome:
        """
        Validate, scan and notify for one alert.

        Returns:
            AlertOutcome (errors are recorded, never raised)
        """
        logger.info(f"Starting scan for alert {alert.title!r}")

        try:
            alert = validate(alert, config, self.environ)
        except ValidationError as e:
            logger.error(f"Skipping invalid alert {alert.title!r}: {e}")
            self.notifier.error_tracker.capture_exception(e)
            return AlertOutcome(title=alert.title, status=STATUS_INVALID, error_message=str(e))

        try:
            results = self.scanner.scan(alert)

            if not results:
                logger.info(
                    f"No records found in Cloudflare containing any of these: "
                    f"{alert.cf_contains_strings}"
                )
                return AlertOutcome(title=alert.title, status=STATUS_NO_MATCHES)

            delivery = self.notifier.notify(alert, results)

        except Exception as e:
            logger.error(f"Alert {alert.title!r} failed: {e}", exc_info=True)
            self.notifier.notify_error(alert, e)
            return AlertOutcome(title=alert.title, status=STATUS_SCAN_FAILED, error_message=str(e))

        match_count = sum(len(lines) for lines in results.values())
        return AlertOutcome(
            title=alert.title,
            status=STATUS_NOTIFIED,
            match_count=match_count,
            delivery=delivery,
        )
