"""
Zone scanning - looks up every configured zone of an alert in Cloudflare and
collects the records matching the alert's substrings.

A failing zone is reported through the notifier and skipped; it never stops
the scan of the remaining zones.
"""

import logging
from typing import Callable, List

from .errors import ProviderError
from .models import Alert, ScanResult, ZoneRecord
from .record_filter import filter_records

logger = logging.getLogger(__name__)


class ZoneScanner:
    """
    Scans the zones of one alert.

    Args:
        provider_factory: Callable building a DNS provider client from an
            API token. The client must offer resolve_zone(name) and
            list_records(zone_id).
        notifier: Receives notify_error(alert, error) for each failing zone
    """

    def __init__(self, provider_factory: Callable, notifier):
        self.provider_factory = provider_factory
        self.notifier = notifier

    def scan(self, alert: Alert) -> ScanResult:
        """
        Scan every zone of an alert.

        Args:
            alert: Validated alert

        Returns:
            ScanResult: zone -> matched lines, only for zones with matches
        """
        provider = self.provider_factory(alert.cf_api_token)
        logger.info(f"Scanning zones: {', '.join(alert.cf_zone_names)}")

        results: ScanResult = {}

        for zone_name in alert.cf_zone_names:
            try:
                records = self._fetch_zone_records(provider, zone_name)
            except ProviderError as e:
                logger.error(str(e))
                self.notifier.notify_error(alert, e)
                continue

            logger.info(f"Fetched {len(records)} record(s) from zone {zone_name}")

            for substring in alert.cf_contains_strings:
                substring = substring.strip()
                logger.info(f"Searching for {substring!r} in zone {zone_name!r}")

                matches = filter_records(records, substring)
                if matches:
                    logger.info(f"Found {len(matches)} record(s) containing {substring!r} in zone {zone_name!r}")
                    results.setdefault(zone_name, []).extend(matches)

        return results

    def _fetch_zone_records(self, provider, zone_name: str) -> List[ZoneRecord]:
        """
        Resolve a zone and list all of its records.

        Raises:
            ProviderError: If either provider call fails
        """
        try:
            zone_id = provider.resolve_zone(zone_name)
        except Exception as e:
            raise ProviderError.zone_lookup(zone_name, e) from e

        try:
            return list(provider.list_records(zone_id))
        except Exception as e:
            raise ProviderError.record_listing(zone_name, e) from e
