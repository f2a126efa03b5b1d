"""
Bounded exponential-backoff retry for upstream calls.

Every response is classified into one bucket, and the bucket alone decides
whether to return, retry or give up. At most ``max_attempts`` requests are
sent; there is no extra call after the budget is spent.

    bucket        attempts left       final attempt
    SUCCESS       return              return
    CLIENT_ERROR  return              return
    RETRYABLE     sleep, retry        return response
    UNEXPECTED    return              return
    transport     sleep, retry        raise
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List

import requests

from core.errors import UpstreamTransportError

logger = logging.getLogger(__name__)


class StatusBucket(Enum):
    """Terminal classification of one upstream response."""
    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    RETRYABLE = "retryable"
    UNEXPECTED = "unexpected"


def classify_status(status_code: int) -> StatusBucket:
    if 200 <= status_code < 300:
        return StatusBucket.SUCCESS
    if status_code == 429 or status_code >= 500:
        return StatusBucket.RETRYABLE
    if 400 <= status_code < 500:
        return StatusBucket.CLIENT_ERROR
    return StatusBucket.UNEXPECTED


def backoff_delay(base_delay: float, attempt_index: int) -> float:
    """Delay before the attempt after ``attempt_index`` (0-based)."""
    return base_delay * (2 ** attempt_index)


@dataclass
class RetryResult:
    """Final response plus what it took to get it."""
    response: requests.Response
    attempts: int
    delays: List[float] = field(default_factory=list)


def execute_with_retry(
    send: Callable[[], requests.Response],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> RetryResult:
    """
    Call ``send`` until it yields a terminal response or the budget runs out.

    Args:
        send: Issues one upstream request
        max_attempts: Upper bound on requests sent (>= 1)
        base_delay: Seconds to wait after the first failed attempt
        sleep: Wait function, injectable for tests

    Returns:
        RetryResult holding the last response received

    Raises:
        UpstreamTransportError: If the final attempt fails at the network level
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    delays: List[float] = []
    for attempt_index in range(max_attempts):
        attempts = attempt_index + 1
        is_last = attempts == max_attempts

        try:
            response = send()
        except UpstreamTransportError as e:
            if is_last:
                logger.error(f"Upstream transport failure on final attempt {attempts}/{max_attempts}: {e}")
                raise
            delay = backoff_delay(base_delay, attempt_index)
            logger.warning(f"Upstream transport failure on attempt {attempts}/{max_attempts}, retrying in {delay:.2f}s: {e}")
            delays.append(delay)
            sleep(delay)
            continue

        bucket = classify_status(response.status_code)
        if bucket is StatusBucket.RETRYABLE and not is_last:
            delay = backoff_delay(base_delay, attempt_index)
            logger.warning(f"Upstream returned {response.status_code} on attempt {attempts}/{max_attempts}, retrying in {delay:.2f}s")
            delays.append(delay)
            sleep(delay)
            continue

        if bucket is StatusBucket.RETRYABLE:
            logger.error(f"Upstream still returning {response.status_code} after {attempts} attempts")
        return RetryResult(response=response, attempts=attempts, delays=delays)

    # range() always reaches is_last, which returns or raises
    raise AssertionError("retry loop exited without a result")
