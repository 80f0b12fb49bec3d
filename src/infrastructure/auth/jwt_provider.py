"""JWT authentication provider implementation.

Accepts Supabase-issued JWTs (ES256, verified against the project's JWKS)
and locally-signed HS256 tokens (tests and local development).

Supabase JWT payload structure:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "role": "authenticated",
        "aud": "authenticated",
        "user_metadata": { "username": "jane", "display_name": "Jane" },
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

# kid -> JWK, filled on first ES256 token and refreshed on unknown kid
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys() -> dict[str, Any]:
    """Fetch and cache JWKS keys from Supabase."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    jwks_url = settings.supabase_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            keys = {
                key_data["kid"]: key_data
                for key_data in response.json().get("keys", [])
                if key_data.get("kid")
            }
    except (httpx.HTTPError, ValueError):
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}

    _jwks_cache = keys
    logger.info("Fetched %d JWKS keys from Supabase", len(keys))
    return keys


def _display_name_from(payload: dict[str, Any], metadata: dict[str, Any]) -> Optional[str]:
    return (
        metadata.get("display_name")
        or metadata.get("name")
        or metadata.get("full_name")
        or payload.get("name")
    )


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT and extract the user it identifies.

        The signing algorithm is read from the token header: ES256 tokens
        are checked against the JWKS public key, anything else against the
        shared secret.

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg == "ES256":
                payload = await self._validate_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if payload is None:
            return None

        user_id = payload.get("sub")
        email = payload.get("email")
        if not user_id or not email:
            return None

        metadata = payload.get("user_metadata") or {}
        return TokenUser(
            id=UUID(user_id),
            email=email,
            display_name=_display_name_from(payload, metadata),
            username=metadata.get("username"),
            role=payload.get("role"),
        )

    async def _validate_es256(self, token: str, header: dict) -> Optional[dict]:
        """Validate an ES256-signed JWT using JWKS public keys."""
        global _jwks_cache

        kid = header.get("kid")
        if not kid:
            return None

        key_data = (await _get_jwks_keys()).get(kid)
        if not key_data:
            # Unknown kid: the signing key may have rotated
            _jwks_cache = None
            key_data = (await _get_jwks_keys()).get(kid)
            if not key_data:
                logger.warning("JWKS key not found for kid=%s", kid)
                return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """Create an HS256 token for a user (tests and local development)."""
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        metadata: dict[str, Any] = {"display_name": user.display_name}
        if user.username:
            metadata["username"] = user.username

        payload: dict = {
            "sub": str(user.id),
            "email": user.email,
            "aud": "authenticated",
            "role": user.role or "authenticated",
            "exp": expire,
            "user_metadata": metadata,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
