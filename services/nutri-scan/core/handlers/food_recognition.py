"""
POST /analyze - identify foods from a fixed list in a meal photo.

Single upstream attempt, no retry. The upstream envelope goes back to the
caller unmodified.
"""

import logging
import time
from typing import Any, Dict, Optional

from structured_logger import StructuredLogger
from core.gemini import GeminiClient, build_payload, inline_image_part, read_envelope, text_part
from core.models import RecognitionRequest, parse_request
from core.prompts import build_recognition_prompt
from core.utils.config import UpstreamSettings, load_settings
from core.utils.responses import create_response

logger = logging.getLogger(__name__)
structured_logger = StructuredLogger(layer="nutri", service_name="nutri-scan")


def handle_food_recognition(
    req_ctx: dict,
    payload: Any,
    settings: Optional[UpstreamSettings] = None,
    client: Optional[GeminiClient] = None,
) -> Dict[str, Any]:
    """Validate, prompt, forward once, and relay the envelope."""
    request_start_time = time.time()

    request = parse_request(RecognitionRequest, payload)
    prompt = build_recognition_prompt(request.supported_foods)
    logger.info(f"Food recognition request - {len(request.supported_foods)} supported foods, mime type {request.mime_type}")

    settings = settings or load_settings()
    client = client or GeminiClient(
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.timeout,
    )

    upstream_payload = build_payload([
        text_part(prompt),
        inline_image_part(request.base64_image_data, request.mime_type),
    ])
    response = client.generate_content(settings.recognition_model, upstream_payload)
    envelope = read_envelope(response)

    elapsed = time.time() - request_start_time
    logger.info(f"Food recognition completed in {elapsed:.2f}s")
    structured_logger.log_response(req_ctx, status_code=200)
    return create_response(200, envelope, ensure_ascii=False)
