"""
Main entry point for the Nutri Scan Lambda functions.

Each endpoint can be deployed as its own function (analyze_handler,
n_score_handler) or behind the shared path router (lambda_handler).
"""

import json
import logging
import time
from typing import Any, Callable, Dict, Optional

from structured_logger import StructuredLogger
from core.errors import RequestValidationError
from core.gemini import GeminiClient
from core.handlers import handle_food_recognition, handle_n_score
from core.utils.config import UpstreamSettings, get_stage
from core.utils.responses import (
    ALLOWED_METHOD,
    create_response,
    error_response,
    get_method,
    method_not_allowed,
    parse_body,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Initialize structured logger for metrics (REQUEST/RESPONSE/ERROR lifecycle events)
structured_logger = StructuredLogger(layer="nutri", service_name="nutri-scan")


# ============================================================================
# API ENDPOINT DEFINITIONS
# ============================================================================
#
# 1. POST /analyze
#    - Identify foods in a meal photo, restricted to a caller-supplied list
#    - Requires: base64ImageData, supportedFoods
#    - Optional: mimeType (default image/jpeg)
#    - Returns: the upstream generateContent envelope, unmodified
#    - Single upstream attempt
#
# 2. POST /get-n-score  (alias: /n-score)
#    - Score a meal 0-100 from its aggregated nutrition
#    - Requires: totalNutrition {calories, protein, fat, carbs, sugar, fiber, sodium}
#    - Optional: totalNutrition.totalWeight, foodNames
#    - Returns: the model's JSON text {"nScore": ..., "message": ...}
#    - Upstream attempts retried with exponential backoff on 5xx/429/network errors
#
# 3. GET /health
#    - Router only; returns service status and stage
#
# ============================================================================


def _run(event: Dict[str, Any], context: Any, handle: Callable[[dict, Any], Dict[str, Any]]) -> Dict[str, Any]:
    """Shared lifecycle: method gate, body parsing, error mapping, logging."""
    request_start_time = time.time()
    request_id = context.aws_request_id if context else "unknown"
    req_ctx = structured_logger.start_request(event)

    method = get_method(event)
    logger.info(f"Invocation started - Request ID: {request_id}, method: {method}, path: {event.get('path', 'UNKNOWN')}")

    try:
        if method != ALLOWED_METHOD:
            structured_logger.log_warning(req_ctx, f"Method not allowed: {method}", {"method": method})
            structured_logger.log_response(req_ctx, status_code=405)
            return method_not_allowed()

        try:
            payload = parse_body(event)
        except ValueError as e:
            raise RequestValidationError(str(e)) from e

        return handle(req_ctx, payload)

    except RequestValidationError as e:
        logger.warning(f"Rejected request: {e}")
        structured_logger.log_error(req_ctx, e, status_code=400)
        return error_response(400, str(e))
    except Exception as e:
        logger.error(f"Function error: {e}")
        structured_logger.log_error(req_ctx, e, status_code=500)
        return error_response(500, str(e))
    finally:
        total_elapsed = time.time() - request_start_time
        logger.info(f"Invocation completed in {total_elapsed:.2f}s - Request ID: {request_id}")


def analyze_handler(
    event: Dict[str, Any],
    context: Any,
    settings: Optional[UpstreamSettings] = None,
    client: Optional[GeminiClient] = None,
) -> Dict[str, Any]:
    """Lambda entry point for food recognition."""
    return _run(
        event,
        context,
        lambda req_ctx, payload: handle_food_recognition(req_ctx, payload, settings=settings, client=client),
    )


def n_score_handler(
    event: Dict[str, Any],
    context: Any,
    settings: Optional[UpstreamSettings] = None,
    client: Optional[GeminiClient] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, Any]:
    """Lambda entry point for the N-Score."""
    return _run(
        event,
        context,
        lambda req_ctx, payload: handle_n_score(req_ctx, payload, settings=settings, client=client, sleep=sleep),
    )


def handle_health(event: Dict[str, Any]) -> Dict[str, Any]:
    req_ctx = structured_logger.start_request(event)
    response = create_response(200, {"status": "healthy", "service": "nutri-scan", "stage": get_stage()})
    structured_logger.log_response(req_ctx, status_code=200)
    return response


ROUTES = {
    "analyze": analyze_handler,
    "get-n-score": n_score_handler,
    "n-score": n_score_handler,
}


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Route API Gateway events by the last path segment.

    The method gate belongs to each endpoint handler, so a GET to /analyze
    is answered with 405, not 404.
    """
    path = (event.get("path") or (event.get("requestContext") or {}).get("http", {}).get("path") or "").rstrip("/")
    segments = [segment for segment in path.strip("/").split("/") if segment]
    target = segments[-1] if segments else ""
    logger.debug(f"Routing path {path!r} to {target!r}")

    if target in ROUTES:
        return ROUTES[target](event, context)

    if target == "health" and get_method(event) == "GET":
        return handle_health(event)

    req_ctx = structured_logger.start_request(event)
    structured_logger.log_warning(req_ctx, f"Endpoint not found - path: {path}", {"path": path})
    structured_logger.log_response(req_ctx, status_code=404)
    logger.debug(f"Unrouted event: {json.dumps(event, default=str)[:1000]}")
    return create_response(404, {"error": "Endpoint not found"})
