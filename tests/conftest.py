"""Shared fixtures for the Nutri Scan unit tests.

Nothing here touches the network: the upstream client is a mock and
responses are built in memory.
"""

import json
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
import requests

from core.gemini import GeminiClient
from core.utils.config import UpstreamSettings
from structured_logger import StructuredLogger


_VALID_TOTALS = {
    "calories": 512.4,
    "protein": 23.456,
    "fat": 10,
    "carbs": 60.04,
    "sugar": 12.36,
    "fiber": 7.0,
    "sodium": 845.7,
    "totalWeight": 350.2,
}


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("GOOGLE_API_KEY", "NUTRI_SECRETS_ARN"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> UpstreamSettings:
    return UpstreamSettings(api_key="test-key", base_delay=0.5)


@pytest.fixture
def upstream() -> MagicMock:
    return MagicMock(spec=GeminiClient)


@pytest.fixture
def sleep() -> MagicMock:
    return MagicMock()


@pytest.fixture
def req_ctx() -> dict:
    return StructuredLogger(layer="nutri", service_name="nutri-scan-tests").start_request(
        {"httpMethod": "POST", "path": "/test"}
    )


@pytest.fixture
def make_response():
    def _make(status_code: int, json_body: Any = None, text: Optional[str] = None) -> requests.Response:
        response = requests.Response()
        response.status_code = status_code
        if json_body is not None:
            text = json.dumps(json_body)
        response._content = (text or "").encode("utf-8")
        response.encoding = "utf-8"
        return response
    return _make


@pytest.fixture
def make_event():
    def _make(body: Any = None, method: str = "POST", path: str = "/get-n-score") -> dict:
        return {
            "httpMethod": method,
            "path": path,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps(body) if body is not None else None,
        }
    return _make


@pytest.fixture
def envelope_with_text():
    def _make(text: str) -> dict:
        return {
            "candidates": [{
                "content": {"parts": [{"text": text}], "role": "model"},
                "finishReason": "STOP",
            }],
            "usageMetadata": {"promptTokenCount": 321, "candidatesTokenCount": 24},
        }
    return _make


@pytest.fixture
def valid_totals() -> dict:
    return dict(_VALID_TOTALS)
