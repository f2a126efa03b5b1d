"""
Configuration for the Nutri Scan functions.

Module constants hold the defaults. load_settings() resolves the environment
on every call so each invocation sees the current values and the current
credential.
"""

import os
from dataclasses import dataclass
from typing import Optional

from core.utils.credentials import get_google_api_key

GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Recognition needs a vision-capable model; scoring is text only
RECOGNITION_MODEL = "gemini-2.5-flash-preview-05-20"
N_SCORE_MODEL = "gemini-1.5-flash-latest"

MAX_UPSTREAM_ATTEMPTS = 3
RETRY_BASE_DELAY_SECONDS = 1.0
UPSTREAM_TIMEOUT_SECONDS = 30

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"


def get_stage() -> str:
    """Get the current deployment stage from environment."""
    return os.getenv("STAGE", "dev")


@dataclass(frozen=True)
class UpstreamSettings:
    """Everything a handler needs to talk to the upstream API."""
    api_key: Optional[str]
    base_url: str = GEMINI_API_BASE_URL
    recognition_model: str = RECOGNITION_MODEL
    n_score_model: str = N_SCORE_MODEL
    max_attempts: int = MAX_UPSTREAM_ATTEMPTS
    base_delay: float = RETRY_BASE_DELAY_SECONDS
    timeout: float = UPSTREAM_TIMEOUT_SECONDS


def load_settings() -> UpstreamSettings:
    """
    Build UpstreamSettings from the environment.

    A missing API key is not an error here; the client refuses to start
    without one, so request validation still runs first.
    """
    return UpstreamSettings(
        api_key=get_google_api_key(),
        base_url=os.getenv("GEMINI_API_BASE_URL", GEMINI_API_BASE_URL),
        recognition_model=os.getenv("NUTRI_RECOGNITION_MODEL", RECOGNITION_MODEL),
        n_score_model=os.getenv("NUTRI_SCORE_MODEL", N_SCORE_MODEL),
        max_attempts=int(os.getenv("NUTRI_MAX_ATTEMPTS", str(MAX_UPSTREAM_ATTEMPTS))),
        base_delay=float(os.getenv("NUTRI_RETRY_BASE_DELAY", str(RETRY_BASE_DELAY_SECONDS))),
        timeout=float(os.getenv("NUTRI_UPSTREAM_TIMEOUT", str(UPSTREAM_TIMEOUT_SECONDS))),
    )
