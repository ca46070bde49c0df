"""
Exception types raised by the scanner pipeline.

Only ConfigLoadError is allowed to escape the Lambda handler. Every other
error is absorbed at its component boundary and reported.
"""

from typing import Optional


class ScannerError(Exception):
    """Base class for scanner errors."""
    pass


class ConfigLoadError(ScannerError):
    """Raised when the scanner configuration cannot be retrieved or decoded."""
    pass


class ValidationError(ScannerError):
    """
    Raised when an alert is missing a required field after defaulting.

    Attributes:
        field: Name of the first missing Alert field
    """

    def __init__(self, field: str, title: Optional[str] = None):
        self.field = field
        self.title = title
        if title:
            message = f"{field} is required (alert {title!r})"
        else:
            message = f"{field} is required"
        super().__init__(message)


class ProviderError(ScannerError):
    """
    Raised when Cloudflare cannot resolve a zone or list its records.

    Attributes:
        zone: Zone name being scanned
        cause: Underlying exception
    """

    def __init__(self, zone: str, message: str, cause: Optional[BaseException] = None):
        self.zone = zone
        self.cause = cause
        super().__init__(message)

    @classmethod
    def zone_lookup(cls, zone: str, cause: BaseException) -> 'ProviderError':
        return cls(zone, f"error getting zone {zone}: {cause}", cause)

    @classmethod
    def record_listing(cls, zone: str, cause: BaseException) -> 'ProviderError':
        return cls(zone, f"error getting records for zone {zone}: {cause}", cause)


class DeliveryError(ScannerError):
    """
    Raised by the mail transport when a message cannot be sent to one recipient.

    Attributes:
        recipient: Destination address
        cause: Underlying exception (may be None)
    """

    def __init__(self, recipient: str, message: str, cause: Optional[BaseException] = None):
        self.recipient = recipient
        self.cause = cause
        super().__init__(message)
