"""
Tests for AlertRunner orchestration.
"""

import pytest
from unittest.mock import Mock
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from domain.alert_runner import AlertRunner
from domain.models import Alert, ScannerConfig, ZoneRecord
from domain.notifier import Notifier
from domain.zone_scanner import ZoneScanner


@pytest.fixture
def provider():
    provider = Mock()
    provider.resolve_zone.return_value = "zone-1"
    provider.list_records.return_value = [
        ZoneRecord(name="staging.example.com", content="1.2.3.4"),
        ZoneRecord(name="prod.example.com", content="5.6.7.8"),
    ]
    return provider


@pytest.fixture
def send_email():
    return Mock(return_value="message-id")


@pytest.fixture
def error_tracker():
    return Mock()


@pytest.fixture
def runner(provider, send_email, error_tracker):
    notifier = Notifier(send_email=send_email, error_tracker=error_tracker)
    scanner = ZoneScanner(provider_factory=Mock(return_value=provider), notifier=notifier)
    return AlertRunner(scanner=scanner, notifier=notifier, environ={})


def make_alert(title, contains="staging", **overrides):
    values = dict(
        title=title,
        cf_api_token="abc123",
        cf_zone_names=["example.com"],
        cf_contains_strings=[contains],
        recipient_emails=["cio@example.com"],
        ses_subject_text=f"{title} report",
    )
    values.update(overrides)
    return Alert(**values)


class TestAlertRunner:
    """Test AlertRunner.run()."""

    def test_matches_are_emailed(self, runner, send_email):
        config = ScannerConfig(ses_return_to_addr="no_reply@example.com", alerts=[make_alert("one")])

        outcome = runner.run(config)

        assert outcome.success is True
        assert outcome.alerts[0].status == "notified"
        assert outcome.alerts[0].match_count == 1
        send_email.assert_called_once()
        kwargs = send_email.call_args.kwargs
        assert kwargs['subject'] == "one report"
        assert kwargs['sender'] == "no_reply@example.com"
        assert kwargs['charset'] == "UTF-8"

    def test_no_matches_sends_nothing(self, runner, send_email):
        """Test that empty results for every alert send no email but succeed."""
        config = ScannerConfig(
            ses_return_to_addr="no_reply@example.com",
            alerts=[make_alert("one", contains="legacy"), make_alert("two", contains="old")],
        )

        outcome = runner.run(config)

        assert outcome.success is True
        assert [a.status for a in outcome.alerts] == ["no_matches", "no_matches"]
        send_email.assert_not_called()

    def test_empty_alert_does_not_stop_later_alerts(self, runner, send_email):
        config = ScannerConfig(
            ses_return_to_addr="no_reply@example.com",
            alerts=[make_alert("one", contains="legacy"), make_alert("two")],
        )

        outcome = runner.run(config)

        assert [a.status for a in outcome.alerts] == ["no_matches", "notified"]
        assert send_email.call_args.kwargs['subject'] == "two report"

    def test_invalid_alert_is_skipped(self, runner, send_email, error_tracker):
        config = ScannerConfig(
            ses_return_to_addr="no_reply@example.com",
            alerts=[Alert(title="broken", cf_api_token="abc123"), make_alert("two")],
        )

        outcome = runner.run(config)

        assert outcome.alerts[0].status == "invalid"
        assert "cf_contains_strings is required" in outcome.alerts[0].error_message
        assert outcome.alerts[1].status == "notified"
        error_tracker.capture_exception.assert_called_once()
        send_email.assert_called_once()

    def test_unexpected_scan_error_is_reported(self, runner, provider, send_email, error_tracker):
        """Test that an error outside zone handling is emailed and the run continues."""
        runner.scanner.provider_factory = Mock(side_effect=[RuntimeError("bad token"), provider])
        config = ScannerConfig(
            ses_return_to_addr="no_reply@example.com",
            alerts=[make_alert("one"), make_alert("two")],
        )

        outcome = runner.run(config)

        assert [a.status for a in outcome.alerts] == ["scan_failed", "notified"]
        assert outcome.alerts[0].error_message == "bad token"
        subjects = [c.kwargs['subject'] for c in send_email.call_args_list]
        assert subjects == ["error attempting to scan Cloudflare.", "two report"]

    def test_delivery_failures_do_not_fail_run(self, runner, send_email):
        send_email.side_effect = RuntimeError("MessageRejected")
        config = ScannerConfig(ses_return_to_addr="no_reply@example.com", alerts=[make_alert("one")])

        outcome = runner.run(config)

        assert outcome.success is True
        assert outcome.alerts[0].delivery.failed_recipients == ["cio@example.com"]

    def test_environment_fallback(self, provider, send_email, error_tracker):
        notifier = Notifier(send_email=send_email, error_tracker=error_tracker)
        scanner = ZoneScanner(provider_factory=Mock(return_value=provider), notifier=notifier)
        runner = AlertRunner(scanner=scanner, notifier=notifier, environ={
            'CF_API_TOKEN': 'env-token',
            'CF_ZONE_NAMES': 'example.com',
            'CF_CONTAINS_STRINGS': 'staging',
            'RECIPIENT_EMAILS': 'a@x, b@x',
            'SES_RETURN_TO_ADDR': 'no_reply@example.com',
            'SES_SUBJECT_TEXT': 'From env',
        })

        outcome = runner.run(ScannerConfig(alerts=[Alert(title="env")]))

        assert outcome.alerts[0].status == "notified"
        scanner.provider_factory.assert_called_once_with('env-token')
        assert send_email.call_count == 2


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
