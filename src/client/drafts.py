"""Draft auto-save for in-progress forms.

Every change is mirrored to client storage right away; the save callback
fires only once edits have settled for the configured delay. The stored
draft lives as long as the owning form: ``close`` removes it.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, Optional
from uuid import UUID

import orjson
import structlog

from client.storage import KeyValueStorage
from core.config import settings

logger = structlog.get_logger()

SaveCallback = Callable[[Any], Optional[Awaitable[None]]]


def draft_key(form_kind: str, user_id: UUID | str | None) -> Optional[str]:
    """Storage key for a form draft, or None when nobody is signed in."""
    if not user_id:
        return None
    return f"{form_kind}Draft:{user_id}"


def _dump(state: Any) -> bytes:
    return orjson.dumps(state, option=orjson.OPT_SORT_KEYS)


class DraftAutoSave:
    """Local mirror plus debounced save notification for one form."""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: Optional[str],
        on_save: SaveCallback,
        initial: Any = None,
        delay_ms: int = settings.draft_autosave_delay_ms,
        enabled: bool = True,
    ) -> None:
        self._storage = storage
        self._key = key
        self._on_save = on_save
        self._delay = delay_ms / 1000
        self.enabled = enabled
        self._state = initial
        self._settled = self._snapshot(initial)
        self._timer: Optional[asyncio.Task[None]] = None

    @property
    def key(self) -> Optional[str]:
        return self._key

    @property
    def state(self) -> Any:
        return self._state

    def update(self, state: Any) -> None:
        """Record a new form state. Must be called inside a running loop."""
        self._state = state
        if not self.enabled:
            return

        snapshot = self._snapshot(state)
        if self._key and snapshot is not None:
            self._write(snapshot)

        self._cancel_timer()
        if snapshot is None or snapshot != self._settled:
            self._timer = asyncio.create_task(self._fire(state, snapshot))

    async def save_now(self) -> None:
        """Skip the delay and notify with the current state."""
        self._cancel_timer()
        await self._notify(self._state, self._snapshot(self._state))

    def clear(self) -> None:
        """Forget the stored draft (after submit or cancel)."""
        if self._key:
            self._remove()

    def restore(self) -> Any:
        """Return the stored draft for this key, or None."""
        if not self._key:
            return None
        try:
            raw = self._storage.get_item(self._key)
        except (OSError, ValueError) as exc:
            logger.debug("draft_storage_unavailable", key=self._key, error=str(exc))
            return None
        if raw is None:
            return None
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.debug("draft_corrupt", key=self._key)
            return None

    async def settle(self) -> None:
        if self._timer is not None and not self._timer.done():
            await asyncio.wait([self._timer])

    async def close(self) -> None:
        self._cancel_timer()
        self.clear()

    async def __aenter__(self) -> "DraftAutoSave":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _fire(self, state: Any, snapshot: Optional[bytes]) -> None:
        await asyncio.sleep(self._delay)
        await self._notify(state, snapshot)

    async def _notify(self, state: Any, snapshot: Optional[bytes]) -> None:
        outcome = self._on_save(state)
        if inspect.isawaitable(outcome):
            await outcome
        self._settled = snapshot

    def _snapshot(self, state: Any) -> Optional[bytes]:
        """Serialized state, or None when it is not JSON-serializable."""
        try:
            return _dump(state)
        except TypeError as exc:
            logger.debug("draft_not_serializable", key=self._key, error=str(exc))
            return None

    # Storage failures (quota, permissions) never interrupt the form.
    def _write(self, snapshot: bytes) -> None:
        try:
            self._storage.set_item(self._key, snapshot.decode())  # type: ignore[arg-type]
        except (OSError, ValueError) as exc:
            logger.debug("draft_write_failed", key=self._key, error=str(exc))

    def _remove(self) -> None:
        try:
            self._storage.remove_item(self._key)  # type: ignore[arg-type]
        except (OSError, ValueError) as exc:
            logger.debug("draft_remove_failed", key=self._key, error=str(exc))
