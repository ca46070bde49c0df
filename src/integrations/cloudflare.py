"""
Cloudflare DNS API client

This module provides the read-only subset of the Cloudflare v4 REST API the
scanner needs: resolving a zone name to its identifier and listing every DNS
record of a zone.

Usage:
    from integrations.cloudflare import CloudflareClient

    client = CloudflareClient(api_token="...")
    zone_id = client.resolve_zone("example.org")
    for record in client.list_records(zone_id):
        print(record.name, record.content)
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests

from domain.models import ZoneRecord

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'https://api.cloudflare.com/client/v4'


# ============================================================================
# Custom Exception Classes
# ============================================================================

class CloudflareAPIError(Exception):
    """Raised when the Cloudflare API rejects a request or cannot be reached."""
    pass


class ZoneNotFoundError(CloudflareAPIError):
    """Raised when no zone matches the requested name."""
    pass


# ============================================================================
# Client
# ============================================================================

class CloudflareClient:
    """
    Minimal Cloudflare client authenticated with an API token.

    Requests are made once, without retries; the next scheduled scan is the
    retry.
    """

    # (connect, read) in seconds
    DEFAULT_TIMEOUT = (10, 60)
    RECORDS_PER_PAGE = 100

    def __init__(self, api_token: str, api_url: Optional[str] = None):
        if not api_token:
            raise CloudflareAPIError("Cloudflare API token is required")

        self.api_url = (api_url or os.environ.get('CLOUDFLARE_API_URL') or DEFAULT_API_URL).rstrip('/')
        self.session = requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {api_token}',
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Send a GET request and return the decoded Cloudflare envelope.

        Raises:
            CloudflareAPIError: On transport errors, non-JSON bodies or
                responses with success=false
        """
        url = f"{self.api_url}{path}"
        logger.debug(f"GET {url} params={params}")

        try:
            response = self.session.get(url, params=params, timeout=self.DEFAULT_TIMEOUT)
        except requests.RequestException as e:
            raise CloudflareAPIError(f"request to {path} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            raise CloudflareAPIError(
                f"HTTP status {response.status_code}: unexpected response body from {path}"
            )

        if not response.ok or not payload.get('success', False):
            raise CloudflareAPIError(
                f"HTTP status {response.status_code}: {_format_errors(payload)}"
            )

        return payload

    def resolve_zone(self, zone_name: str) -> str:
        """
        Look up the identifier of a zone by name.

        Args:
            zone_name: Zone name, e.g. "example.org"

        Returns:
            str: The zone identifier

        Raises:
            ZoneNotFoundError: If no zone or more than one zone matches
            CloudflareAPIError: If the request fails
        """
        payload = self._get('/zones', params={'name': zone_name})
        zones = payload.get('result') or []

        if len(zones) == 0:
            raise ZoneNotFoundError(f"zone could not be found: {zone_name}")
        if len(zones) > 1:
            raise ZoneNotFoundError(f"ambiguous zone name; an account ID might help: {zone_name}")

        return zones[0]['id']

    def list_records(self, zone_id: str) -> List[ZoneRecord]:
        """
        List every DNS record of a zone, following pagination.

        Args:
            zone_id: Zone identifier from resolve_zone

        Returns:
            List of ZoneRecord in API order

        Raises:
            CloudflareAPIError: If any page request fails
        """
        records: List[ZoneRecord] = []
        page = 1

        while True:
            payload = self._get(
                f'/zones/{zone_id}/dns_records',
                params={'page': page, 'per_page': self.RECORDS_PER_PAGE},
            )

            for item in payload.get('result') or []:
                records.append(ZoneRecord(
                    name=item.get('name') or '',
                    content=item.get('content') or '',
                ))

            total_pages = (payload.get('result_info') or {}).get('total_pages', 1) or 1
            if page >= total_pages:
                break
            page += 1

        return records


def _format_errors(payload: Dict[str, Any]) -> str:
    errors = payload.get('errors') or []
    if not errors:
        return 'unknown error'
    return '; '.join(f"{e.get('code', '?')}: {e.get('message', '')}" for e in errors)
