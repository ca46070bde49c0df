"""
Alert validation and defaulting.

Required fields are checked in a fixed order and the first missing one is
reported. Empty fields are first filled from the scanner-level defaults and
then from the environment (comma-delimited lists for the legacy
environment-only deployment).
"""

import dataclasses
import logging
from typing import List, Mapping

from .errors import ValidationError
from .models import Alert, ScannerConfig

logger = logging.getLogger(__name__)

DEFAULT_CHAR_SET = 'UTF-8'
DEFAULT_REGION = 'us-east-1'
DEFAULT_TITLE = 'Cloudflare scanner alert'

# (Alert field, environment key, is list) in the order they are checked
REQUIRED_FIELDS = [
    ('cf_api_token', 'CF_API_TOKEN', False),
    ('cf_contains_strings', 'CF_CONTAINS_STRINGS', True),
    ('cf_zone_names', 'CF_ZONE_NAMES', True),
    ('recipient_emails', 'RECIPIENT_EMAILS', True),
    ('ses_return_to_addr', 'SES_RETURN_TO_ADDR', False),
    ('ses_subject_text', 'SES_SUBJECT_TEXT', False),
]


def split_env_list(value: str) -> List[str]:
    """
    Split a comma-delimited environment value.

    Each segment is trimmed; empty segments are dropped.

    Example:
        >>> split_env_list(" a.org, b.org ,,")
        ['a.org', 'b.org']
    """
    return [part.strip() for part in value.split(',') if part.strip()]


def validate(alert: Alert, defaults: ScannerConfig, environ: Mapping[str, str]) -> Alert:
    """
    Apply defaults to an alert and check its required fields.

    Args:
        alert: Alert as decoded from configuration (not modified)
        defaults: Scanner configuration providing charset and sender defaults
        environ: Environment mapping used as a fallback source

    Returns:
        Alert: A new, fully populated alert

    Raises:
        ValidationError: Naming the first required field still empty
    """
    values = {
        'ses_char_set': alert.ses_char_set or defaults.ses_char_set,
        'ses_return_to_addr': alert.ses_return_to_addr or defaults.ses_return_to_addr,
    }
    populated = dataclasses.replace(alert, **values)

    for field_name, env_key, is_list in REQUIRED_FIELDS:
        current = getattr(populated, field_name)
        if current:
            continue

        env_value = environ.get(env_key, '')
        if env_value:
            logger.info(f"Using {env_key} from environment for alert {alert.title!r}")
            filled = split_env_list(env_value) if is_list else env_value.strip()
            populated = dataclasses.replace(populated, **{field_name: filled})

    for field_name, _, _ in REQUIRED_FIELDS:
        if not getattr(populated, field_name):
            raise ValidationError(field_name, alert.title or None)

    contains_strings = [s.strip() for s in populated.cf_contains_strings]

    return dataclasses.replace(
        populated,
        title=populated.title or DEFAULT_TITLE,
        cf_contains_strings=contains_strings,
        ses_char_set=populated.ses_char_set or environ.get('SES_CHAR_SET') or DEFAULT_CHAR_SET,
        ses_region=(
            populated.ses_region
            or environ.get('SES_AWS_REGION')
            or environ.get('AWS_REGION')
            or DEFAULT_REGION
        ),
    )
