"""
HTTP client for the Google Generative Language API (generateContent).
"""

import json
import logging
from typing import Any, Dict, List, Optional

import requests

from core.errors import (
    ConfigurationError,
    InvalidUpstreamStructure,
    UpstreamAPIError,
    UpstreamTransportError,
)
from core.utils.config import GEMINI_API_BASE_URL, UPSTREAM_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


def build_payload(parts: List[Dict[str, Any]], response_mime_type: Optional[str] = None) -> Dict[str, Any]:
    """Wrap content parts in a single-turn generateContent request body."""
    payload: Dict[str, Any] = {"contents": [{"parts": parts}]}
    if response_mime_type:
        payload["generationConfig"] = {"responseMimeType": response_mime_type}
    return payload


def text_part(text: str) -> Dict[str, Any]:
    return {"text": text}


def inline_image_part(base64_data: str, mime_type: str) -> Dict[str, Any]:
    return {"inlineData": {"mimeType": mime_type, "data": base64_data}}


class GeminiClient:
    """Thin wrapper over requests for the generateContent endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = GEMINI_API_BASE_URL,
        timeout: float = UPSTREAM_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ConfigurationError("GOOGLE_API_KEY is not configured")

        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        })

        logger.info(f"Initialized Gemini client with base URL: {self.base_url}")

    def endpoint(self, model: str) -> str:
        return f"{self.base_url}/models/{model}:generateContent"

    def generate_content(self, model: str, payload: Dict[str, Any]) -> requests.Response:
        """
        POST one generateContent request.

        The response is returned whatever its status; callers decide what a
        failure status means.

        Raises:
            UpstreamTransportError: On connection errors, timeouts and other
                network-level failures
        """
        url = self.endpoint(model)
        try:
            response = self.session.post(
                url,
                params={"key": self.api_key},
                data=json.dumps(payload),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Upstream request failed: POST {url} - {e}")
            raise UpstreamTransportError(f"Upstream request failed: {e}") from e

        logger.info(f"Upstream responded {response.status_code} for model {model}")
        return response


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def read_envelope(response: requests.Response) -> Any:
    """
    Turn an upstream response into its parsed JSON envelope.

    Raises:
        UpstreamAPIError: If the status is not 2xx
        InvalidUpstreamStructure: If the body is not JSON
    """
    if not is_success(response.status_code):
        error_text = response.text
        logger.error(f"Upstream error {response.status_code}: {error_text[:500]}")
        raise UpstreamAPIError(response.status_code, error_text)

    try:
        return response.json()
    except ValueError as e:
        raise InvalidUpstreamStructure("envelope", reason=f"body is not valid JSON ({e})") from e
