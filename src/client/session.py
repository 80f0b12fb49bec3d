"""Explicit auth session object for the client library.

Holds the signed-in user and bearer token. Components receive the session
they should use instead of reaching for a global; ``restore`` and
``sign_out`` bracket its lifetime.
"""

from collections.abc import Callable
from dataclasses import asdict, dataclass
from enum import StrEnum
from uuid import UUID

import orjson
import structlog

from client.storage import KeyValueStorage

logger = structlog.get_logger()

SESSION_STORAGE_KEY = "session"


class AuthEvent(StrEnum):
    RESTORED = "RESTORED"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class SessionState:
    access_token: str
    user_id: UUID
    email: str


Listener = Callable[[AuthEvent, SessionState | None], None]


class AuthSession:
    """Current user and token, persisted in client storage."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._state: SessionState | None = None
        self._listeners: list[Listener] = []

    @property
    def state(self) -> SessionState | None:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        return self._state is not None

    @property
    def access_token(self) -> str | None:
        return self._state.access_token if self._state else None

    @property
    def user_id(self) -> UUID | None:
        return self._state.user_id if self._state else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register for auth events; returns the unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def restore(self) -> SessionState | None:
        """Load a persisted session, if any. A corrupt entry is discarded."""
        try:
            raw = self._storage.get_item(SESSION_STORAGE_KEY)
        except (OSError, ValueError) as exc:
            logger.warning("session_storage_unreadable", error=str(exc))
            return None
        if raw is None:
            return None
        try:
            data = orjson.loads(raw)
            state = SessionState(
                access_token=data["access_token"],
                user_id=UUID(data["user_id"]),
                email=data["email"],
            )
        except (orjson.JSONDecodeError, KeyError, TypeError, ValueError):
            logger.warning("session_restore_failed")
            self._storage.remove_item(SESSION_STORAGE_KEY)
            return None

        self._state = state
        self._emit(AuthEvent.RESTORED)
        return state

    def sign_in(self, access_token: str, user_id: UUID, email: str) -> SessionState:
        self._state = SessionState(access_token=access_token, user_id=user_id, email=email)
        payload = asdict(self._state)
        payload["user_id"] = str(user_id)
        self._storage.set_item(SESSION_STORAGE_KEY, orjson.dumps(payload).decode())
        self._emit(AuthEvent.SIGNED_IN)
        return self._state

    def sign_out(self) -> None:
        self._state = None
        self._storage.remove_item(SESSION_STORAGE_KEY)
        self._emit(AuthEvent.SIGNED_OUT)

    def _emit(self, event: AuthEvent) -> None:
        logger.debug("auth_event", auth_event=event.value)
        for listener in list(self._listeners):
            listener(event, self._state)
