"""
Notification - formats scan reports and error reports and sends them to
every recipient of an alert.

Emails are sent one recipient at a time so that one bad address cannot
sabotage the whole batch. Only the last delivery error is reported, together
with the full list of failed recipients.
"""

import logging
from typing import Callable

from .models import Alert, DeliveryOutcome, ScanResult

logger = logging.getLogger(__name__)

ERROR_SUBJECT = "error attempting to scan Cloudflare."
ERROR_BODY_PREFIX = "The Cloudflare scanner failed with the following error. \n"


def format_report(subject: str, results: ScanResult) -> str:
    """
    Build the plain-text body of a scan report.

    Example:
        >>> format_report("Old records", {"a.org": ["x.a.org ... 1.2.3.4"]})
        'Old records\\n\\n Those found in a.org\\nx.a.org ... 1.2.3.4'
    """
    lines = [f"{subject}\n"]
    for zone, matches in results.items():
        lines.append(f" Those found in {zone}")
        lines.extend(matches)
    return "\n".join(lines)


def format_error(error: BaseException) -> str:
    """Build the plain-text body of an error report."""
    return f"{ERROR_BODY_PREFIX}{error}"


class Notifier:
    """
    Sends scan and error reports for an alert.

    Args:
        send_email: Mail transport, called as
            send_email(subject, body, charset, sender, recipient, region)
            and raising on failure
        error_tracker: Object with capture_exception(error) and
            capture_message(message)
    """

    def __init__(self, send_email: Callable, error_tracker):
        self.send_email = send_email
        self.error_tracker = error_tracker

    def notify(self, alert: Alert, results: ScanResult) -> DeliveryOutcome:
        """
        Email the scan report to every recipient of the alert.

        Args:
            alert: Validated alert
            results: Non-empty scan result

        Returns:
            DeliveryOutcome: Failed recipients and the last error
        """
        body = format_report(alert.ses_subject_text, results)
        return self._deliver(alert, alert.ses_subject_text, body, kind='alert')

    def notify_error(self, alert: Alert, error: BaseException) -> DeliveryOutcome:
        """
        Report a scan failure to the error tracker and to every recipient.

        Args:
            alert: Alert being scanned
            error: The failure

        Returns:
            DeliveryOutcome: Failed recipients and the last error
        """
        self.error_tracker.capture_exception(error)
        return self._deliver(alert, ERROR_SUBJECT, format_error(error), kind='error')

    def _deliver(self, alert: Alert, subject: str, body: str, kind: str) -> DeliveryOutcome:
        outcome = DeliveryOutcome()

        for address in alert.recipient_emails:
            outcome.attempted += 1
            try:
                self.send_email(
                    subject=subject,
                    body=body,
                    charset=alert.ses_char_set,
                    sender=alert.ses_return_to_addr,
                    recipient=address,
                    region=alert.ses_region,
                )
            except Exception as e:
                logger.warning(f"Error sending {kind} email {subject!r} to {address}: {e}")
                outcome.record_failure(address, str(e))

        if outcome.has_failures:
            self._report_delivery_failure(alert, outcome)
        else:
            logger.info(f"Sent {kind} email {subject!r} to {outcome.attempted} recipient(s)")

        return outcome

    def _report_delivery_failure(self, alert: Alert, outcome: DeliveryOutcome) -> None:
        addresses = ", ".join(outcome.failed_recipients)
        message = (
            f"Error sending Cloudflare scanner email from {alert.ses_return_to_addr!r} "
            f"to {addresses!r}: {outcome.last_error}"
        )
        logger.error(message)
        self.error_tracker.capture_message(message)
