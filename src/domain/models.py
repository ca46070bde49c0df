"""
Data models for the scanner domain.

These type-safe data structures define clear contracts between components.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from .errors import ConfigLoadError

# Zone name -> ordered "<name> ... <content>" lines
ScanResult = Dict[str, List[str]]


@dataclass
class Alert:
    """
    One scan-and-notify policy.

    Attributes:
        title: Display identifier used in logs
        cf_api_token: Cloudflare API token (never logged)
        cf_zone_names: Zones to scan, in order
        cf_contains_strings: Substrings to look for in record names
        recipient_emails: Addresses that receive the report
        ses_char_set: Charset for subject and body
        ses_return_to_addr: Sender address
        ses_subject_text: Subject of the report email
        ses_region: AWS region used to send the email
    """
    title: str = ''
    cf_api_token: str = field(default='', repr=False)
    cf_zone_names: List[str] = field(default_factory=list)
    cf_contains_strings: List[str] = field(default_factory=list)
    recipient_emails: List[str] = field(default_factory=list)
    ses_char_set: str = ''
    ses_return_to_addr: str = ''
    ses_subject_text: str = ''
    ses_region: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Alert':
        """
        Build an Alert from its AppConfig JSON representation.

        Missing fields are left empty; validation decides whether they are
        required.

        Raises:
            ConfigLoadError: If a field has the wrong type
        """
        if not isinstance(data, dict):
            raise ConfigLoadError(f"alert entry must be an object, got {type(data).__name__}")

        return cls(
            title=_string_field(data, 'Title'),
            cf_api_token=_string_field(data, 'CFApiToken'),
            cf_zone_names=_string_list_field(data, 'CFZoneNames'),
            cf_contains_strings=_string_list_field(data, 'CFContainsStrings'),
            recipient_emails=_string_list_field(data, 'RecipientEmails'),
            ses_char_set=_string_field(data, 'SESCharSet'),
            ses_return_to_addr=_string_field(data, 'SESReturnToAddr'),
            ses_subject_text=_string_field(data, 'SESSubjectText'),
            ses_region=_string_field(data, 'SESAWSRegion'),
        )


@dataclass(frozen=True)
class ScannerConfig:
    """
    Process-wide configuration, loaded once per invocation.

    Attributes:
        ses_char_set: Default charset for alerts without their own
        ses_return_to_addr: Default sender for alerts without their own
        alerts: Alerts to run, in order
    """
    ses_char_set: str = ''
    ses_return_to_addr: str = ''
    alerts: List[Alert] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScannerConfig':
        """
        Decode the AppConfig document.

        Expected shape:
        {
            "SESCharSet": "UTF-8",
            "SESReturnToAddr": "no-reply@example.org",
            "Alerts": [{"Title": ..., "CFApiToken": ..., ...}]
        }

        Raises:
            ConfigLoadError: If the document does not have this shape
        """
        if not isinstance(data, dict):
            raise ConfigLoadError("scanner configuration must be a JSON object")

        alerts = data.get('Alerts')
        if not isinstance(alerts, list):
            raise ConfigLoadError("scanner configuration is missing the 'Alerts' list")

        return cls(
            ses_char_set=_string_field(data, 'SESCharSet'),
            ses_return_to_addr=_string_field(data, 'SESReturnToAddr'),
            alerts=[Alert.from_dict(a) for a in alerts],
        )


@dataclass(frozen=True)
class ZoneRecord:
    """A DNS record as returned by Cloudflare."""
    name: str
    content: str

    @property
    def description(self) -> str:
        """Line used in the report for a matching record."""
        return f"{self.name} ... {self.content}"


@dataclass
class DeliveryOutcome:
    """
    Result of sending one notification to every recipient.

    Only the most recent error message is kept; every failed address is.

    Attributes:
        attempted: Number of recipients a send was attempted for
        failed_recipients: Addresses whose send failed, in order
        last_error: Message of the last failure (None if all succeeded)
    """
    attempted: int = 0
    failed_recipients: List[str] = field(default_factory=list)
    last_error: Optional[str] = None

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_recipients)

    def record_failure(self, recipient: str, error: str) -> None:
        self.failed_recipients.append(recipient)
        self.last_error = error


# Alert statuses reported in AlertOutcome
STATUS_NOTIFIED = 'notified'
STATUS_NO_MATCHES = 'no_matches'
STATUS_INVALID = 'invalid'
STATUS_SCAN_FAILED = 'scan_failed'


@dataclass
class AlertOutcome:
    """
    What happened to one alert during a run.

    Attributes:
        title: Alert title
        status: One of notified, no_matches, invalid, scan_failed
        match_count: Number of matched lines across all zones
        delivery: Delivery outcome of the report (notified only)
        error_message: Error description (invalid/scan_failed only)
    """
    title: str
    status: str
    match_count: int = 0
    delivery: Optional[DeliveryOutcome] = None
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'title': self.title,
            'status': self.status,
            'matchCount': self.match_count,
        }
        if self.delivery is not None:
            result['failedRecipients'] = list(self.delivery.failed_recipients)
        if self.error_message:
            result['error'] = self.error_message
        return result

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        if self.error_message:
            return f"AlertOutcome(title={self.title!r}, status={self.status}, error={self.error_message})"
        return f"AlertOutcome(title={self.title!r}, status={self.status}, matches={self.match_count})"


@dataclass
class RunOutcome:
    """
    Aggregate result of one invocation.

    The run succeeds once every alert has been attempted; per-alert
    failures are recorded but do not fail the run.
    """
    alerts: List[AlertOutcome] = field(default_factory=list)
    success: bool = True

    def count(self, status: str) -> int:
        return sum(1 for a in self.alerts if a.status == status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'alertCount': len(self.alerts),
            'notified': self.count(STATUS_NOTIFIED),
            'alerts': [a.to_dict() for a in self.alerts],
        }


def _string_field(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ConfigLoadError(f"'{key}' must be a string")
    return value


def _string_list_field(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigLoadError(f"'{key}' must be a list of strings")
    return list(value)
