"""
Amazon SES utilities for Lambda handlers.

This module sends plain-text emails through SES, one recipient per call.
"""

import logging
from functools import lru_cache

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from domain.errors import DeliveryError

logger = logging.getLogger(__name__)

# Configure SES client with timeouts to prevent infinite hangs
ses_config = Config(
    retries={
        'max_attempts': 1,  # 1 attempt total (no retries)
        'mode': 'standard'
    },
    connect_timeout=10,  # 10 seconds to establish connection
    read_timeout=30      # 30 seconds max for reading response
)


@lru_cache(maxsize=None)
def _get_client(region: str):
    """Create (once per region) an SES client."""
    logger.info(f"SES client initialized: region={region}, connect=10s, read=30s, max_attempts=1")
    return boto3.client('ses', region_name=region, config=ses_config)


def build_message(subject: str, body: str, charset: str) -> dict:
    """
    Build the SES Message structure for a plain-text email.

    Args:
        subject: Subject line
        body: Plain-text body
        charset: Charset for subject and body (e.g. "UTF-8")

    Returns:
        dict: Message argument for SendEmail
    """
    return {
        'Subject': {'Charset': charset, 'Data': subject},
        'Body': {
            'Text': {'Charset': charset, 'Data': body},
        },
    }


def send_email(
    subject: str,
    body: str,
    charset: str,
    sender: str,
    recipient: str,
    region: str,
) -> str:
    """
    Send one plain-text email to a single recipient.

    Args:
        subject: Subject line
        body: Plain-text body
        charset: Charset for subject and body
        sender: Source address (must be verified in SES)
        recipient: Destination address
        region: AWS region of the SES endpoint

    Returns:
        str: SES message ID

    Raises:
        DeliveryError: If SES rejects the message or cannot be reached

    Example:
        >>> send_email(
        ...     subject="Outdated Cloudflare records",
        ...     body="Outdated Cloudflare records\\n...",
        ...     charset="UTF-8",
        ...     sender="no-reply@example.org",
        ...     recipient="it@example.org",
        ...     region="us-east-1",
        ... )
        '0100018c...'
    """
    try:
        response = _get_client(region).send_email(
            Source=sender,
            Destination={'ToAddresses': [recipient]},
            Message=build_message(subject, body, charset),
        )
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        error_message = e.response.get('Error', {}).get('Message', str(e))
        raise DeliveryError(
            recipient,
            f"send email failed: {error_code}: {error_message}",
            e,
        ) from e
    except BotoCoreError as e:
        raise DeliveryError(recipient, f"send email failed: {e}", e) from e

    message_id = response.get('MessageId', '')
    logger.info(f"Sent {subject!r} email to {recipient!r} (MessageId={message_id})")
    return message_id
