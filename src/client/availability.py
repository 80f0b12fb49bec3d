"""Debounced username availability checker.

Each input change restarts a timer; only when input settles is the candidate
validated locally and, if it passes, checked remotely. Every change takes a
new sequence number and results carrying an older number are dropped, so a
slow response for an earlier value can never overwrite a newer one.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Optional

import httpx
import structlog

from client.backend import BackendError
from core.config import settings
from domain.entities.username import (
    AvailabilityResult,
    normalize_username,
    username_violation,
)

logger = structlog.get_logger()

CheckFn = Callable[[str], Awaitable[AvailabilityResult]]
ResultListener = Callable[[AvailabilityResult], None]


class UsernameAvailabilityChecker:
    """Turns a stream of candidate usernames into availability results."""

    def __init__(
        self,
        check: CheckFn,
        debounce_ms: int = settings.username_check_debounce_ms,
        timeout: float = settings.username_check_timeout_seconds,
        on_result: Optional[ResultListener] = None,
    ) -> None:
        self._check = check
        self._delay = debounce_ms / 1000
        self._timeout = timeout
        self._on_result = on_result
        self._seq = 0
        self._result = AvailabilityResult.neutral()
        self._timer: Optional[asyncio.Task[None]] = None
        self._inflight: set[asyncio.Task[None]] = set()

    @property
    def result(self) -> AvailabilityResult:
        return self._result

    def update(self, candidate: str) -> None:
        """Feed a new raw input value. Must be called inside a running loop."""
        self._seq += 1
        self._cancel_timer()
        self._timer = asyncio.create_task(self._fire(self._seq, candidate))

    def reset(self) -> None:
        """Drop pending work and return to the neutral state."""
        self._seq += 1
        self._cancel_timer()
        self._publish(self._seq, AvailabilityResult.neutral())

    async def settle(self) -> None:
        """Wait until the pending timer and every in-flight check are done."""
        while True:
            pending = [t for t in (self._timer, *self._inflight) if t is not None and not t.done()]
            if not pending:
                return
            await asyncio.wait(pending)

    async def aclose(self) -> None:
        self._seq += 1
        self._cancel_timer()
        for task in list(self._inflight):
            task.cancel()
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    async def __aenter__(self) -> "UsernameAvailabilityChecker":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _fire(self, seq: int, candidate: str) -> None:
        await asyncio.sleep(self._delay)

        value = normalize_username(candidate)
        if not value:
            self._publish(seq, AvailabilityResult.neutral())
            return

        violation = username_violation(value)
        if violation:
            self._publish(seq, AvailabilityResult.rejected(violation))
            return

        self._publish(seq, AvailabilityResult(available=False, is_checking=True))
        task = asyncio.create_task(self._remote(seq, value))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _remote(self, seq: int, username: str) -> None:
        try:
            result = await asyncio.wait_for(self._check(username), self._timeout)
        except TimeoutError:
            logger.warning("username_check_timed_out", username=username, timeout=self._timeout)
            result = AvailabilityResult.failed()
        except (BackendError, httpx.HTTPError) as exc:
            logger.warning("username_check_failed", username=username, error=str(exc))
            result = AvailabilityResult.failed()
        except Exception:
            logger.exception("username_check_crashed", username=username)
            result = AvailabilityResult.failed()

        self._publish(seq, result)

    def _publish(self, seq: int, result: AvailabilityResult) -> None:
        if seq != self._seq:
            logger.debug("stale_username_result_dropped", seq=seq, latest=self._seq)
            return
        self._result = result
        if self._on_result is not None:
            self._on_result(result)
