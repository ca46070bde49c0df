"""
AWS service functions for the scanner Lambda.

This package contains reusable service functions for loading the scanner
configuration from AppConfig and sending email through SES.
"""

__all__ = ['appconfig', 'ses']
