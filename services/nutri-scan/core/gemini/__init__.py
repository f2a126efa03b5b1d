"""
Upstream access for the Google Generative Language API.
"""

from .client import GeminiClient, build_payload, inline_image_part, read_envelope, text_part
from .envelope import extract_generated_text
from .retry import RetryResult, StatusBucket, classify_status, execute_with_retry

__all__ = [
    "GeminiClient",
    "build_payload",
    "inline_image_part",
    "read_envelope",
    "text_part",
    "extract_generated_text",
    "RetryResult",
    "StatusBucket",
    "classify_status",
    "execute_with_retry",
]
