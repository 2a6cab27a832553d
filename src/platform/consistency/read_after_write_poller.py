"""
Read-after-write poller

Commands are applied out of process and their effects only become visible
once a projection has caught up. A caller that needs a synchronous answer
polls the read model until the projection reflects what it is waiting for,
or gives up after a short, bounded wait.

Rules:
- A timeout is not an error: the poller returns None and the caller treats
  the write as "not visible yet".
- Waiting is local to the calling task (anyio.sleep). No lock is held, other
  requests keep running, and cancelling the caller stops the poll at once.
- Meant for human-perceptible waits (seconds). Long-running waits belong to
  a push channel, not to this loop.
"""

from typing import Awaitable, Callable, Optional, TypeVar

import anyio
import attrs

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.registration_metrics import metrics


T = TypeVar('T')


def _must_be_positive(_instance: object, attribute: 'attrs.Attribute[float]', value: float) -> None:
    if value <= 0:
        raise ValueError(f'{attribute.name} must be positive, got {value}')


@attrs.define(frozen=True)
class PollProfile:
    """Deadline and retry interval for one kind of read model, in seconds."""

    name: str
    max_wait: float = attrs.field(validator=_must_be_positive)
    interval: float = attrs.field(validator=_must_be_positive)


async def poll_until(
    *,
    lookup: Callable[[], Awaitable[Optional[T]]],
    accept: Callable[[T], bool],
    profile: PollProfile,
) -> Optional[T]:
    """
    Repeat `lookup` until it yields a value satisfying `accept`.

    Args:
        lookup: Async read against the read model, None when nothing is there
        accept: Predicate the value must satisfy (freshness, state)
        profile: Deadline and interval to use

    Returns:
        The first accepted value, or None once `profile.max_wait` has elapsed
    """
    started_at = anyio.current_time()
    deadline = started_at + profile.max_wait
    attempts = 0

    while True:
        attempts += 1
        value = await lookup()
        if value is not None and accept(value):
            metrics.record_poll(
                read_model=profile.name,
                hit=True,
                attempts=attempts,
                duration_seconds=anyio.current_time() - started_at,
            )
            if attempts > 1:
                Logger.base.debug(
                    f'🔁 [POLL] {profile.name} visible after {attempts} attempts'
                )
            return value

        remaining = deadline - anyio.current_time()
        if remaining <= 0:
            break
        # Never sleep past the deadline: the last lookup happens right at it
        await anyio.sleep(min(profile.interval, remaining))

    metrics.record_poll(
        read_model=profile.name,
        hit=False,
        attempts=attempts,
        duration_seconds=anyio.current_time() - started_at,
    )
    Logger.base.warning(
        f'⏳ [POLL] {profile.name} not visible within {profile.max_wait}s '
        f'({attempts} attempts)'
    )
    return None
