"""
AWS AppConfig utilities for Lambda handlers.

This module retrieves the scanner configuration document from AppConfig and
decodes it into a ScannerConfig.
"""

import json
import logging
import os

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from domain.errors import ConfigLoadError
from domain.models import ScannerConfig

logger = logging.getLogger(__name__)

appconfig_config = Config(
    retries={
        'max_attempts': 1,  # 1 attempt total (no retries)
        'mode': 'standard'
    },
    connect_timeout=10,
    read_timeout=30
)

# Initialize AppConfig Data client at module level (reused across invocations)
appconfig_client = boto3.client('appconfigdata', config=appconfig_config)


def get_identifiers() -> dict:
    """
    Read the AppConfig identifiers from the environment.

    Returns:
        dict: application, profile and environment identifiers
    """
    return {
        'application': os.environ.get('APPLICATION_IDENTIFIER') or os.environ.get('APP_ID') or 'cloudflare-scanner',
        'profile': os.environ.get('CONFIG_PROFILE_IDENTIFIER') or os.environ.get('CONFIG_ID') or 'default',
        'environment': os.environ.get('ENVIRONMENT') or os.environ.get('ENV_ID') or 'prod',
    }


def fetch_configuration() -> bytes:
    """
    Fetch the latest configuration document from AppConfig.

    Returns:
        bytes: Raw configuration document

    Raises:
        ConfigLoadError: If AppConfig cannot be reached or rejects the request
    """
    ids = get_identifiers()
    logger.info(
        f"Loading configuration: application={ids['application']}, "
        f"profile={ids['profile']}, environment={ids['environment']}"
    )

    try:
        session = appconfig_client.start_configuration_session(
            ApplicationIdentifier=ids['application'],
            ConfigurationProfileIdentifier=ids['profile'],
            EnvironmentIdentifier=ids['environment'],
        )
        response = appconfig_client.get_latest_configuration(
            ConfigurationToken=session['InitialConfigurationToken'],
        )
        return response['Configuration'].read()
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        logger.error(f"Failed to load configuration from AppConfig: error_code={error_code}: {e}")
        raise ConfigLoadError(f"AppConfig request failed: {e}") from e
    except BotoCoreError as e:
        logger.error(f"Failed to load configuration from AppConfig: {e}")
        raise ConfigLoadError(f"AppConfig request failed: {e}") from e


def parse_scanner_config(document: bytes) -> ScannerConfig:
    """
    Decode a configuration document.

    Args:
        document: JSON document as bytes

    Returns:
        ScannerConfig

    Raises:
        ConfigLoadError: If the document is not valid JSON of the expected shape
    """
    try:
        data = json.loads(document)
    except (ValueError, TypeError) as e:
        raise ConfigLoadError(f"configuration is not valid JSON: {e}") from e

    return ScannerConfig.from_dict(data)


def load_scanner_config() -> ScannerConfig:
    """
    Fetch and decode the scanner configuration.

    Raises:
        ConfigLoadError: On any retrieval or decoding failure
    """
    config = parse_scanner_config(fetch_configuration())
    logger.info(f"Loaded configuration with {len(config.alerts)} alert(s)")
    return config
