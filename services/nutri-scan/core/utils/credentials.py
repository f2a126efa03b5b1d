"""
Credential management utilities for Lambda function.

Resolves the Google Generative Language API key. The environment wins;
otherwise the key is loaded from the platform secret in AWS Secrets Manager.
Nothing is cached between invocations.
"""

import os
import json
import logging
from typing import Dict, Optional

import boto3

logger = logging.getLogger(__name__)


def _get_platform_secrets(secret_arn: str) -> Dict:
    """Fetch and decode the JSON platform secret."""
    logger.info(f"Loading platform secrets from: {secret_arn}")
    secrets_client = boto3.client('secretsmanager', region_name=os.getenv('AWS_REGION', 'eu-west-2'))

    response = secrets_client.get_secret_value(SecretId=secret_arn)
    secret_string = response.get('SecretString')

    if not secret_string:
        raise ValueError(f"Secret string is empty for secret {secret_arn}")

    try:
        secrets = json.loads(secret_string)
    except json.JSONDecodeError as e:
        raise ValueError(f"Secret is not valid JSON: {str(e)}")

    if not isinstance(secrets, dict):
        raise ValueError(f"Secret {secret_arn} must be a JSON object")
    return secrets


def get_google_api_key() -> Optional[str]:
    """
    Return the upstream API key for this invocation.

    Lookup order:
        1. GOOGLE_API_KEY environment variable
        2. NUTRI_SECRETS_ARN secret, under ``google.api_key`` or ``GOOGLE_API_KEY``

    Returns:
        The key, or None if neither source provides one
    """
    api_key = os.getenv("GOOGLE_API_KEY")
    if api_key:
        return api_key

    secret_arn = os.getenv("NUTRI_SECRETS_ARN")
    if not secret_arn:
        logger.warning("GOOGLE_API_KEY is not set and NUTRI_SECRETS_ARN is not configured")
        return None

    secrets = _get_platform_secrets(secret_arn)
    google_secrets = secrets.get('google') or {}
    api_key = google_secrets.get('api_key') or secrets.get('GOOGLE_API_KEY')
    if not api_key:
        logger.warning(f"Google API key not found in secret {secret_arn}")
        return None

    logger.info("Google API key loaded from platform secrets")
    return api_key
