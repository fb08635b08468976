from __future__ import annotations

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

import httpx


def with_retry(max_retries: int = 3, backoff_factor: float = 0.5, max_wait: float = 10):
    """Exponential backoff retry decorator for auth backend calls.

    Only transport-level failures are retried; an HTTP error status is an answer.
    """
    return retry(
        retry=retry_if_exception_type((httpx.TransportError, httpx.TimeoutException)),
        stop=stop_after_attempt(max(max_retries, 1)),
        wait=wait_exponential(multiplier=backoff_factor, max=max_wait),
        reraise=True,
    )
