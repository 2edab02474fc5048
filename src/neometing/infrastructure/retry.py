# Hey future me - this is the generic "try again, give up after N" helper.
#
# Only the playlist batch fetch uses it right now. limit counts RETRIES, not
# attempts: limit=0 runs the task exactly once. No sleeping between attempts,
# the permit pool already throttles us.
#
# USAGE:
#   songs = await retry(
#       2,
#       envelope,
#       lambda env: client.execute(SONG_INFO_URL, env),
#       lambda exc: logger.warning("batch failed: %s", exc),
#       retry_on=(RequestError,),
#   )
"""Bounded retry combinator for async tasks."""

from __future__ import annotations

import copy
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

I = TypeVar("I")  # noqa: E741
O = TypeVar("O")  # noqa: E741


async def retry(
    limit: int,
    value: I,
    task: Callable[[I], Awaitable[O]],
    on_error: Callable[[Exception], None],
    retry_on: tuple[type[Exception], ...] = (Exception,),
) -> O:
    """Run ``task(value)``, retrying up to ``limit`` times on failure.

    Every attempt receives its own shallow copy of ``value``.

    Args:
        limit: Maximum number of retries (0 = single attempt)
        value: Input handed to each attempt
        task: Async callable producing the result
        on_error: Called with the exception before each retry
        retry_on: Exception types that trigger a retry; others propagate at once

    Returns:
        Result of the first successful attempt

    Raises:
        Exception: The last failure once the retries are exhausted
    """
    if limit < 0:
        raise ValueError("retry limit must not be negative")

    attempt = 0
    while True:
        try:
            return await task(copy.copy(value))
        except retry_on as e:
            if attempt >= limit:
                raise
            on_error(e)
            attempt += 1
            logger.debug("Retrying (attempt %d/%d): %s", attempt + 1, limit + 1, e)
