"""Async HTTP client for the Picks API."""

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from api.v1.schemas.profile import ProfileDetailResponse
from api.v1.schemas.username import UsernameCheckResponse, UsernameUpdateResponse
from client.session import AuthSession
from core.config import settings
from domain.entities.username import (
    AvailabilityResult,
    CooldownInfo,
    UsernameUpdateResult,
)

logger = structlog.get_logger()


class BackendError(Exception):
    """The backend could not be reached or answered with an error status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)


class BackendClient:
    """Thin wrapper over the REST API.

    Authenticated calls take the bearer token from the injected session at
    call time, so a sign-in or sign-out is picked up immediately.
    """

    def __init__(
        self,
        session: AuthSession,
        base_url: str = settings.api_base_url,
        timeout: float = settings.username_check_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def check_username(self, username: str) -> AvailabilityResult:
        """Ask the backend whether ``username`` is free.

        A taken name is a normal answer; BackendError means the answer is
        unknown.
        """
        data = await self._request("POST", "/api/v1/usernames/check", json={"username": username})
        body = self._parse(UsernameCheckResponse, data)
        return AvailabilityResult(available=body.available, message=body.message)

    async def update_username(self, username: str) -> UsernameUpdateResult:
        data = await self._request(
            "POST", "/api/v1/profiles/me/username", json={"username": username}, auth=True
        )
        body = self._parse(UsernameUpdateResponse, data)
        return UsernameUpdateResult(
            success=body.success,
            message=body.message,
            reason=body.reason,
            username=body.username,
            username_changed_at=body.username_changed_at,
        )

    async def get_my_profile(self) -> tuple[dict[str, Any], CooldownInfo]:
        """Return the caller's profile fields and server-computed cooldown."""
        data = await self._request("GET", "/api/v1/profiles/me", auth=True)
        body = self._parse(ProfileDetailResponse, data)
        cooldown = CooldownInfo(
            can_change=body.cooldown.can_change,
            days_remaining=body.cooldown.days_remaining,
            next_change_date=body.cooldown.next_change_date,
        )
        return body.data.model_dump(), cooldown

    async def _request(
        self, method: str, path: str, *, auth: bool = False, **kwargs: Any
    ) -> Any:
        headers: dict[str, str] = {}
        if auth:
            token = self._session.access_token
            if not token:
                raise BackendError("Not signed in", status_code=401, error_code="UNAUTHORIZED")
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("backend_unreachable", method=method, path=path, error=str(exc))
            raise BackendError(f"Request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            error_code = data.get("error_code") if isinstance(data, dict) else None
            message = data.get("message") if isinstance(data, dict) else None
            raise BackendError(
                message or f"HTTP {response.status_code}",
                status_code=response.status_code,
                error_code=error_code,
            )
        return data

    @staticmethod
    def _parse(model: Any, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise BackendError(f"Unexpected response body: {exc.error_count()} errors") from exc
