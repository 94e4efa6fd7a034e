from __future__ import annotations

import random
import time
from typing import Callable, Tuple, Type, TypeVar

import structlog

log = structlog.get_logger()

T = TypeVar("T")


def jittered_backoff(attempt: int, *, max_backoff: float) -> float:
    if max_backoff <= 0:
        return 0.0
    return min(2 ** attempt, max_backoff) + random.uniform(0.1, 0.9)


def call_with_retry(
    func: Callable[[], T],
    *,
    retries: int,
    max_backoff: float,
    retry_on: Tuple[Type[BaseException], ...],
    name: str = "upstream",
) -> T:
    """Call ``func`` and retry it at most ``retries`` extra times.

    Only exceptions listed in ``retry_on`` are retried; anything else
    propagates immediately. The last error is re-raised once attempts run out.
    """
    attempts = max(retries, 0) + 1
    for attempt in range(attempts):
        try:
            return func()
        except retry_on as e:
            if attempt + 1 >= attempts:
                raise
            delay = jittered_backoff(attempt, max_backoff=max_backoff)
            log.warning("retry.scheduled", call=name, attempt=attempt + 1, delay=round(delay, 2), error=str(e))
            if delay:
                time.sleep(delay)
    raise RuntimeError(f"{name}: no attempts made")  # pragma: no cover
