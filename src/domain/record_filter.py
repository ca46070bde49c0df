"""
Record name filtering.
"""

from typing import Iterable, List

from .models import ZoneRecord


def filter_records(records: Iterable[ZoneRecord], substring: str) -> List[str]:
    """
    Find records whose name contains a substring.

    The match is a case-sensitive literal containment test. Records with an
    empty name never match; an empty substring matches every other record.

    Args:
        records: Records of one zone
        substring: Text to look for in record names

    Returns:
        List of "<name> ... <content>" lines, in input order
    """
    return [r.description for r in records if r.name and substring in r.name]
