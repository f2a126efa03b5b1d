"""
POST /get-n-score - ask the model for an N-Score and a short message.

The upstream call is retried with exponential backoff. Only the generated
text (already JSON, produced by the model) is returned.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from structured_logger import StructuredLogger
from core.gemini import (
    GeminiClient,
    build_payload,
    execute_with_retry,
    extract_generated_text,
    read_envelope,
    text_part,
)
from core.models import NScoreResult, ScoreRequest, parse_request
from core.prompts import build_n_score_prompt
from core.utils.config import UpstreamSettings, load_settings
from core.utils.responses import create_raw_response

logger = logging.getLogger(__name__)
structured_logger = StructuredLogger(layer="nutri", service_name="nutri-scan")


def _check_result_shape(req_ctx: dict, generated_text: str) -> None:
    """Warn when the model's JSON does not look like an N-Score; never alters it."""
    try:
        NScoreResult.model_validate_json(generated_text)
    except ValidationError as e:
        structured_logger.log_warning(req_ctx, "Generated N-Score does not match the expected shape", {
            "errors": [error.get("msg") for error in e.errors()],
        })


def handle_n_score(
    req_ctx: dict,
    payload: Any,
    settings: Optional[UpstreamSettings] = None,
    client: Optional[GeminiClient] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, Any]:
    """Validate, prompt, forward with retry, and relay the generated text."""
    request_start_time = time.time()

    request = parse_request(ScoreRequest, payload)
    prompt = build_n_score_prompt(request.total_nutrition, request.food_names)
    logger.info(f"N-Score request - {len(request.food_names)} food names")

    settings = settings or load_settings()
    client = client or GeminiClient(
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.timeout,
    )

    upstream_payload = build_payload([text_part(prompt)], response_mime_type="application/json")
    result = execute_with_retry(
        lambda: client.generate_content(settings.n_score_model, upstream_payload),
        max_attempts=settings.max_attempts,
        base_delay=settings.base_delay,
        sleep=sleep,
    )
    structured_logger.log_metric(req_ctx, "UpstreamAttempts", result.attempts)

    envelope = read_envelope(result.response)
    generated_text = extract_generated_text(envelope)
    _check_result_shape(req_ctx, generated_text)

    elapsed = time.time() - request_start_time
    logger.info(f"N-Score completed in {elapsed:.2f}s after {result.attempts} attempt(s)")
    structured_logger.log_response(req_ctx, status_code=200)
    return create_raw_response(200, generated_text, headers={"Content-Type": "application/json"})
