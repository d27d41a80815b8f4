"""Bounded fixed-delay retry for async tasks."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_BACK_OFF_SECONDS = 0.5


def _always(_error: BaseException) -> bool:
    return True


async def retry_task(
    task: Callable[[], Awaitable[T]],
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
    back_off: float = DEFAULT_BACK_OFF_SECONDS,
    should_retry: Callable[[BaseException], bool] | None = None,
    on_retry: Callable[[BaseException], None] | None = None,
) -> T:
    """Run *task* until it succeeds or the retry budget is spent.

    Args:
        task: Zero-argument coroutine factory, invoked once per attempt.
        max_retries: Total attempts, including the first one.
        back_off: Fixed delay in seconds between attempts.
        should_retry: Predicate deciding whether a failure is retryable.
        on_retry: Hook invoked with the failure before each retry.

    Returns:
        The task result.

    Raises:
        The last error raised by *task*, unchanged, once retries are
        exhausted or *should_retry* declines.
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    def _before_sleep(state: RetryCallState) -> None:
        if on_retry is None or state.outcome is None:
            return
        error = state.outcome.exception()
        if error is not None:
            on_retry(error)

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_retries),
        wait=wait_fixed(back_off),
        retry=retry_if_exception(should_retry or _always),
        before_sleep=_before_sleep,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await task()
    raise RuntimeError("retry loop finished without a result")
