"""
Clients for third-party services used by the scanner.

This package contains the Cloudflare DNS API client and Sentry error tracking.
"""

__all__ = ['cloudflare', 'error_tracking']
