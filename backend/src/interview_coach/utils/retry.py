"""Bounded exponential backoff for rate-limited model calls.

Only rate-limit / overload signals are retried. Everything else fails fast,
and the budget is always finite so an overloaded upstream is not hammered.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx

from interview_coach.exceptions import (
    RetryableError,
    UpstreamError,
    UpstreamFatalError,
    UpstreamOverloadError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_STATUSES: frozenset[int | str] = frozenset(
    {429, "RESOURCE_EXHAUSTED", "TOO_MANY_REQUESTS"}
)

OVERLOADED_MESSAGE = "Model service overloaded. Retries exhausted."


@dataclass(frozen=True)
class RetryPolicy:
    retries: int = 4
    min_delay: float = 0.5  # seconds
    max_delay: float = 6.0
    jitter: float = 0.2

    def __post_init__(self) -> None:
        if self.retries < 1:
            raise ValueError("retries must be at least 1")

    def backoff(self, attempt: int) -> float:
        """Delay before retrying after the ``attempt``-th failure (1-based), without jitter."""
        return min(self.max_delay, self.min_delay * (2 ** (attempt - 1)))


def _is_rate_limit(status: Any) -> bool:
    return isinstance(status, (int, str)) and status in RETRYABLE_STATUSES


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _status_from_body(response: httpx.Response) -> int | str | None:
    """Read ``{"error": {"status": ..., "code": ...}}`` from a provider error body."""
    try:
        body = response.json()
    except ValueError:
        return None
    error = _field(body, "error")
    if error is None:
        return None
    return _field(error, "status") or _field(error, "code")


def error_status(exc: BaseException) -> int | str | None:
    """Best-effort status of a provider error: ``status``, ``error.code``, ``code``."""
    if isinstance(exc, UpstreamError):
        return exc.status
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        if _is_rate_limit(status):
            return status
        return _status_from_body(exc.response) or status

    status = _field(exc, "status")
    if status is None:
        error = _field(exc, "error")
        if error is not None:
            status = _field(error, "code") or _field(error, "status")
    if status is None:
        status = _field(exc, "code")
    return status


def normalize_error(exc: BaseException) -> RetryableError | UpstreamFatalError:
    """Map any raw failure onto the retryable / fatal taxonomy."""
    if isinstance(exc, (RetryableError, UpstreamFatalError)):
        return exc
    status = error_status(exc)
    message = str(exc) or type(exc).__name__
    if _is_rate_limit(status):
        return RetryableError(message, status=status)
    return UpstreamFatalError(message, status=status)


def is_overload(exc: BaseException) -> bool:
    """True for exhausted retries or a bare rate-limit signal."""
    if isinstance(exc, (UpstreamOverloadError, RetryableError)):
        return True
    return _is_rate_limit(error_status(exc))


async def with_retries(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy = RetryPolicy(),
    *,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """Run ``operation``, retrying rate-limited failures with backoff + jitter.

    Makes at most ``policy.retries`` attempts. Fatal errors propagate (as
    UpstreamFatalError, chained to the original) after the first attempt.

    Raises:
        UpstreamOverloadError: every attempt was rate limited.
        UpstreamFatalError: a non-retryable failure.
    """
    attempt = 0
    while attempt < policy.retries:
        try:
            return await operation()
        except Exception as exc:
            err = normalize_error(exc)
            if isinstance(err, UpstreamFatalError):
                if err is exc:
                    raise
                raise err from exc

            attempt += 1
            if attempt >= policy.retries:
                logger.warning(
                    "Model request rate limited (status=%s), attempt %d/%d, giving up",
                    err.status,
                    attempt,
                    policy.retries,
                )
                break
            delay = policy.backoff(attempt) + random.uniform(0, policy.jitter)
            logger.warning(
                "Model request rate limited (status=%s), retry %d/%d in %.2fs",
                err.status,
                attempt,
                policy.retries,
                delay,
            )
            await sleep(delay)

    raise UpstreamOverloadError(OVERLOADED_MESSAGE, status=429)
