"""Leading-edge rate limiting for noisy callbacks."""

from __future__ import annotations

import functools
import time
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


def debounce(
    func: F, delay: float, *, clock: Callable[[], float] = time.monotonic
) -> Callable[..., Any]:
    """Call *func* at most once per *delay* seconds; extra calls are dropped.

    The first call in a window goes through immediately.
    """
    last_call: float | None = None

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        nonlocal last_call
        now = clock()
        if last_call is not None and now - last_call < delay:
            return None
        last_call = now
        return func(*args, **kwargs)

    return wrapper
