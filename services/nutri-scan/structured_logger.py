"""
Structured Logger - JSON lifecycle logs for the Nutri Scan functions.

Every invocation emits one REQUEST event and then exactly one RESPONSE or
ERROR event. WARNING and METRIC events may be emitted in between.

Usage:
    from structured_logger import StructuredLogger

    logger = StructuredLogger(layer="nutri", service_name="nutri-scan")

    def lambda_handler(event, context):
        req_ctx = logger.start_request(event)

        try:
            # ... your code ...
            logger.log_response(req_ctx, status_code=200)
            return response
        except Exception as e:
            logger.log_error(req_ctx, e, status_code=500)
            raise
"""

import json
import random
import string
import time
import traceback
from datetime import datetime, timezone
from typing import Optional, Dict, Any

LOG_SCHEMA_VERSION = 2.1

# Query parameters that must never reach the logs
REDACTED_QUERY_PARAMS = {"key", "api_key", "apikey"}


def normalize_route(method: str, path: str) -> str:
    """Collapse stage prefixes so /dev/analyze and /prod/analyze share a route."""
    if not path:
        return f"{method} /" if method else "/"

    segments = [segment for segment in path.strip("/").split("/") if segment]
    if segments and segments[0] in {"dev", "staging", "prod"}:
        segments = segments[1:]
    normalized = "/" + "/".join(segments)

    return f"{method} {normalized}" if method else normalized


def redact_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """Replace credential-looking query parameters with a placeholder."""
    return {
        key: ("***" if key.lower() in REDACTED_QUERY_PARAMS else value)
        for key, value in params.items()
    }


class StructuredLogger:
    """
    Structured logger for emitting JSON lifecycle logs.

    Output goes to stdout, which CloudWatch captures line by line.
    """

    def __init__(self, layer: str = "nutri", service_name: Optional[str] = None):
        """
        Initialize the structured logger.

        Args:
            layer: Service layer identifier
            service_name: Name of the service (e.g., "nutri-scan")
        """
        self.layer = layer
        self.service_name = service_name

    def start_request(self, event: dict) -> dict:
        """
        Start tracking a request. Call this at the beginning of your handler.

        Args:
            event: Lambda event object

        Returns:
            Request context dict to pass to log_response or log_error
        """
        request_context = event.get("requestContext") or {}
        headers = event.get("headers") or {}

        request_id = (
            request_context.get("requestId") or
            headers.get("x-request-id") or
            headers.get("X-Request-Id") or
            self._generate_request_id()
        )

        correlation_id = (
            headers.get("x-correlation-id") or
            headers.get("X-Correlation-Id") or
            self._generate_correlation_id()
        )

        method = event.get("httpMethod", "") or request_context.get("http", {}).get("method", "")
        path = event.get("path", "") or request_context.get("http", {}).get("path", "")

        context = {
            "request_id": request_id,
            "correlation_id": correlation_id,
            "method": method,
            "path": path,
            "route": f"{method} {path}",
            "route_normalized": normalize_route(method, path),
            "layer": self.layer,
            "service_name": self.service_name,
            "start_time": time.time(),
            "query_params": redact_params(event.get("queryStringParameters") or {}),
        }

        self._emit("REQUEST", context, {
            "queryParams": context["query_params"],
        })

        return context

    def log_response(self, ctx: dict, status_code: int = 200):
        """
        Log a completed response.

        Args:
            ctx: Request context from start_request
            status_code: HTTP status code
        """
        duration_ms = int((time.time() - ctx.get("start_time", time.time())) * 1000)

        self._emit("RESPONSE", ctx, {
            "statusCode": status_code,
            "durationMs": duration_ms,
        })

    def log_error(
        self,
        ctx: dict,
        error: Exception,
        status_code: int = 500,
    ):
        """
        Log an error.

        Args:
            ctx: Request context from start_request
            error: The exception that occurred
            status_code: HTTP status code
        """
        duration_ms = int((time.time() - ctx.get("start_time", time.time())) * 1000)

        stack_trace = traceback.format_exc()
        if len(stack_trace) > 1000:
            stack_trace = stack_trace[:1000]

        self._emit("ERROR", ctx, {
            "statusCode": status_code,
            "durationMs": duration_ms,
            "error": {
                "message": str(error),
                "name": type(error).__name__,
                "stack": stack_trace,
                "upstreamStatus": getattr(error, "status_code", None),
            },
        })

    def log_warning(
        self,
        ctx: dict,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Log a warning. Warnings don't terminate the request.

        Args:
            ctx: Request context from start_request
            message: Warning message
            details: Additional details about the warning
        """
        warning_data = {"message": message}
        if details:
            warning_data.update(details)

        self._emit("WARNING", ctx, {
            "warning": warning_data,
        })

    def log_metric(
        self,
        ctx: dict,
        metric_name: str,
        value: float,
        unit: str = "Count",
    ):
        """
        Log a custom metric.

        Args:
            ctx: Request context from start_request
            metric_name: Name of the metric
            value: Metric value
            unit: Unit of measurement
        """
        self._emit("METRIC", ctx, {
            "metricName": metric_name,
            "value": value,
            "unit": unit,
        })

    def _emit(self, log_type: str, ctx: dict, extra: Optional[Dict[str, Any]] = None):
        payload = {
            "schemaVersion": LOG_SCHEMA_VERSION,
            "logType": log_type,
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "requestId": ctx.get("request_id"),
            "correlationId": ctx.get("correlation_id"),
            "layer": ctx.get("layer", self.layer),
            "serviceName": ctx.get("service_name", self.service_name),
            "route": ctx.get("route"),
            "routeNormalized": ctx.get("route_normalized"),
        }

        if extra:
            payload.update(extra)

        print(json.dumps(payload, default=str))

    @staticmethod
    def _generate_request_id() -> str:
        random_suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=9))
        return f"req_{int(time.time() * 1000)}_{random_suffix}"

    @staticmethod
    def _generate_correlation_id() -> str:
        random_suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=9))
        return f"corr_{int(time.time() * 1000)}_{random_suffix}"
