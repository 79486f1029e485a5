"""
Resilience Infrastructure.

Retry policy and structured retry event logging for the read path.

Reads are retried per node (tenacity) and then fall back to the next node;
writes are never retried. The per-node policy is built here so the client
and its tests share one definition:

    retrying = read_retrying(retries=2)
    response = await retrying(fetch_from_node, url)
"""

from typing import Any

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from clusterctl.core.exceptions import TransportError
from clusterctl.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_READ_WAIT = wait_exponential(multiplier=0.5, min=0.5, max=4)


def log_retry(retry_state: Any) -> None:
    """Tenacity before_sleep callback that emits structured retry events.

    Pass this as `before_sleep=log_retry` in any retry policy.

    Args:
        retry_state: tenacity.RetryCallState instance
    """
    duration_ms = None
    if retry_state.outcome_timestamp and retry_state.start_time:
        duration_ms = round(
            (retry_state.outcome_timestamp - retry_state.start_time) * 1000
        )

    error = None
    if retry_state.outcome and retry_state.outcome.failed:
        error = str(retry_state.outcome.exception())

    fn_name = getattr(retry_state.fn, "__name__", "unknown")

    logger.warning(
        f"Retrying {fn_name} (attempt {retry_state.attempt_number})",
        extra={
            "resilience_event": "retry_attempt",
            "dependency": fn_name,
            "attempt": retry_state.attempt_number,
            "duration_ms": duration_ms,
            "error": error,
        },
    )


def read_retrying(retries: int, wait: wait_base | None = None) -> AsyncRetrying:
    """Build the per-node retry policy for idempotent reads.

    Args:
        retries: Extra attempts after the first one (0 disables retrying)
        wait: Backoff strategy, exponential by default

    Returns:
        AsyncRetrying that retries TransportError only and re-raises the
        last one when attempts are exhausted
    """
    return AsyncRetrying(
        stop=stop_after_attempt(retries + 1),
        wait=wait if wait is not None else DEFAULT_READ_WAIT,
        retry=retry_if_exception_type(TransportError),
        before_sleep=log_retry,
        reraise=True,
    )
