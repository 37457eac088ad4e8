"""Polling and retry loops used to block until a remote resource converges.

Two loops live here:

- ``wait_for`` polls a fetch function on a fixed interval until a status
  classifier reports a terminal status or the timeout elapses.
- ``retry_on_transient`` repeats a side-effecting call while it fails with a
  recognized transient error, then makes one last attempt past the deadline.

Both are fixed-interval loops built on tenacity: no exponential backoff and
no jitter.
"""

import logging
import time
from collections.abc import Callable
from enum import Enum
from typing import TypeVar

from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception,
    retry_if_result,
    stop_after_delay,
    stop_before_delay,
    wait_fixed,
)

from .errors import NotFoundError, WaitTimeoutError
from .settings import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WaitStatus(Enum):
    """Classification of a polled resource status."""

    PENDING = "pending"
    READY = "ready"
    ERROR = "error"
    DELETED = "deleted"


def status_classifier(
    ready: set[str],
    error: set[str],
    deleted: set[str] | None = None,
    attribute: str = "status",
) -> Callable[[object], WaitStatus]:
    """Build a classifier reading ``attribute`` of the fetched object.

    Args:
        ready: Statuses meaning the resource converged
        error: Terminal failure statuses
        deleted: Statuses meaning the resource is gone
        attribute: Attribute holding the status

    Returns:
        Function mapping a fetched object to a WaitStatus; every status not
        listed is PENDING
    """
    deleted = deleted or set()

    def classify(resource: object) -> WaitStatus:
        status = getattr(resource, attribute)
        if status in ready:
            return WaitStatus.READY
        if status in error:
            return WaitStatus.ERROR
        if status in deleted:
            return WaitStatus.DELETED
        return WaitStatus.PENDING

    return classify


def _poll_interval(interval: float | None) -> float:
    return get_settings().poll_interval if interval is None else interval


def wait_for(
    fetch: Callable[[], T],
    classify: Callable[[T], WaitStatus],
    *,
    timeout: float,
    interval: float | None = None,
    resource: str = "resource",
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Poll ``fetch`` until ``classify`` reports a terminal status.

    Args:
        fetch: Returns the current remote object, raises NotFoundError once it is gone
        classify: Maps the fetched object to a WaitStatus
        timeout: Overall deadline in seconds
        interval: Seconds between polls (defaults to settings.poll_interval)
        resource: Name used in log and error messages
        sleep: Sleep function (injected by tests)

    Returns:
        The last fetched object, whose status is READY or ERROR

    Raises:
        NotFoundError: If the resource is deleted (or never existed)
        WaitTimeoutError: If no terminal status was reached before timeout
    """
    interval = _poll_interval(interval)

    def _log_pending(retry_state: RetryCallState) -> None:
        logger.debug(
            f"Waiting for {resource}: attempt {retry_state.attempt_number} "
            f"still pending, next poll in {interval:g}s"
        )

    retrying = Retrying(
        retry=retry_if_result(lambda result: classify(result) is WaitStatus.PENDING),
        stop=stop_after_delay(timeout),
        wait=wait_fixed(interval),
        sleep=sleep,
        before_sleep=_log_pending,
    )

    try:
        result = retrying(fetch)
    except RetryError as e:
        logger.error(f"Timed out after {timeout:g}s waiting for {resource}")
        raise WaitTimeoutError(resource, timeout) from e

    if classify(result) is WaitStatus.DELETED:
        raise NotFoundError(f"{resource} is deleted")

    logger.debug(f"{resource} reached a terminal status")
    return result


def retry_on_transient(
    call: Callable[[], T],
    is_transient: Callable[[BaseException], bool],
    *,
    timeout: float,
    interval: float | None = None,
    description: str = "call",
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Repeat ``call`` while it fails with a transient error.

    Success and non-transient errors return immediately. Once ``timeout`` has
    elapsed one more attempt is made and its outcome is returned as is,
    whatever the error class, so the total latency is bounded by timeout plus
    one call.

    Args:
        call: Side-effecting remote call
        is_transient: Predicate recognizing the retryable error
        timeout: Overall deadline in seconds
        interval: Seconds between attempts (defaults to settings.poll_interval)
        description: Name used in log messages
        sleep: Sleep function (injected by tests)

    Returns:
        Result of the first successful attempt
    """
    interval = _poll_interval(interval)

    def _log_transient(retry_state: RetryCallState) -> None:
        logger.info(
            f"{description} failed with a transient error "
            f"({retry_state.outcome.exception()}), retrying in {interval:g}s"
        )

    def _last_attempt(retry_state: RetryCallState) -> T:
        # Regular attempts stop before the deadline, the last one starts at it.
        remaining = timeout - retry_state.seconds_since_start
        if remaining > 0:
            sleep(remaining)
        logger.warning(
            f"{description} still failing after {timeout:g}s, making a last attempt"
        )
        return call()

    retrying = Retrying(
        retry=retry_if_exception(is_transient),
        stop=stop_before_delay(timeout),
        wait=wait_fixed(interval),
        sleep=sleep,
        before_sleep=_log_transient,
        retry_error_callback=_last_attempt,
    )
    return retrying(call)
