"""
HTTP response utilities for Lambda function.
"""

import json
import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

ALLOWED_METHOD = "POST"


def get_method(event: Dict[str, Any]) -> str:
    """Return the HTTP method of a REST (v1) or HTTP API (v2) event."""
    method = event.get("httpMethod") or (event.get("requestContext") or {}).get("http", {}).get("method")
    return (method or "").upper()


def parse_body(event: Dict[str, Any]) -> Any:
    """
    Parse request body from Lambda event.

    Args:
        event: Lambda event dictionary

    Returns:
        Parsed JSON body, or empty dict if no body

    Raises:
        ValueError: If the body is not valid JSON
    """
    body = event.get("body")
    if not body:
        return {}

    # Handle string body (API Gateway)
    if isinstance(body, str):
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON body: {str(e)}")
            raise ValueError(f"Invalid JSON in request body: {str(e)}")

    # Handle already-parsed body
    if isinstance(body, (dict, list)):
        return body

    logger.warning(f"Unexpected body type: {type(body)}")
    return {}


def _default_headers(headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    default_headers = {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
        "Access-Control-Allow-Methods": "POST,OPTIONS"
    }
    if headers:
        default_headers.update(headers)
    return default_headers


def create_response(
    status_code: int,
    body: Any,
    headers: Optional[Dict[str, str]] = None,
    ensure_ascii: bool = True
) -> Dict[str, Any]:
    """
    Create Lambda API Gateway response.

    Args:
        status_code: HTTP status code
        body: Response body (will be JSON-serialized)
        headers: Optional response headers
        ensure_ascii: Escape non-ASCII characters (False keeps relayed text as-is)

    Returns:
        Lambda API Gateway response dictionary
    """
    return {
        "statusCode": status_code,
        "headers": _default_headers(headers),
        "body": json.dumps(body, default=str, ensure_ascii=ensure_ascii)
    }


def create_raw_response(
    status_code: int,
    body: str,
    headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Create a response whose body is already serialized and passed through untouched."""
    return {
        "statusCode": status_code,
        "headers": _default_headers(headers),
        "body": body
    }


def error_response(status_code: int, message: str) -> Dict[str, Any]:
    return create_response(status_code, {"error": message})


def method_not_allowed() -> Dict[str, Any]:
    return create_response(405, {"error": "Method Not Allowed"}, headers={"Allow": ALLOWED_METHOD})
