"""
Pytest configuration and fixtures for all tests.
"""

import os
import sys
import pytest

# Add src to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

# Set up test environment variables before importing any modules
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-east-1')
os.environ.setdefault('AWS_ACCESS_KEY_ID', 'testing')
os.environ.setdefault('AWS_SECRET_ACCESS_KEY', 'testing')
os.environ.setdefault('ENVIRONMENT', 'test')
os.environ.setdefault('LOG_LEVEL', 'INFO')
os.environ.pop('SENTRY_DSN', None)

from domain.models import Alert, ScannerConfig, ZoneRecord  # noqa: E402


@pytest.fixture
def alert():
    """A fully populated alert."""
    return Alert(
        title="Outdated records",
        cf_api_token="abc123",
        cf_zone_names=["example.com"],
        cf_contains_strings=["staging"],
        recipient_emails=["cio@example.com", "it-guy@example.com"],
        ses_char_set="UTF-8",
        ses_return_to_addr="no_reply@example.com",
        ses_subject_text="Outdated Cloudflare records",
        ses_region="us-east-1",
    )


@pytest.fixture
def scanner_config(alert):
    """Scanner configuration holding the alert fixture."""
    return ScannerConfig(
        ses_char_set="UTF-8",
        ses_return_to_addr="no_reply@example.com",
        alerts=[alert],
    )


@pytest.fixture
def records():
    """Records returned by Cloudflare for example.com."""
    return [
        ZoneRecord(name="staging.example.com", content="1.2.3.4"),
        ZoneRecord(name="prod.example.com", content="5.6.7.8"),
    ]
