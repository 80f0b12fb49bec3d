"""Unit tests for JWTAuthProvider.

Covers HS256 round trips with Supabase-style user metadata, the JWKS
fetch/cache helper and the ES256 validation path with a mocked key set.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import httpx
import pytest
from jose import jwt as jose_jwt

from infrastructure.auth import jwt_provider as jwt_provider_module
from infrastructure.auth.jwt_provider import JWTAuthProvider, _get_jwks_keys
from infrastructure.auth.provider import TokenUser

JWKS_URL = "https://example.supabase.co/auth/v1/.well-known/jwks.json"


def _make_hs256_token(payload: dict, secret: str = "test-secret") -> str:
    return jose_jwt.encode(payload, secret, algorithm="HS256")


def _mock_jwks_client(payload: dict) -> AsyncMock:
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status = MagicMock()

    client = AsyncMock()
    client.get.return_value = response
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


@pytest.fixture(autouse=True)
def _clear_jwks_cache():
    """Reset the module-level JWKS cache around every test."""
    jwt_provider_module._jwks_cache = None
    yield
    jwt_provider_module._jwks_cache = None


@pytest.fixture
def hs256_provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


# --- HS256 tokens ---


class TestHs256Tokens:
    async def test_round_trip_keeps_username_claim(self, hs256_provider: JWTAuthProvider):
        user = TokenUser(id=uuid4(), email="jane@example.com", display_name="Jane", username="jane")

        result = await hs256_provider.validate_token(hs256_provider.create_token(user))

        assert result is not None
        assert result.id == user.id
        assert result.username == "jane"
        assert result.display_name == "Jane"
        assert result.role == "authenticated"

    async def test_username_claim_is_optional(self, hs256_provider: JWTAuthProvider):
        user = TokenUser(id=uuid4(), email="jane@example.com")

        result = await hs256_provider.validate_token(hs256_provider.create_token(user))

        assert result is not None
        assert result.username is None

    async def test_display_name_falls_back_to_full_name(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token(
            {
                "sub": str(uuid4()),
                "email": "jane@example.com",
                "user_metadata": {"full_name": "Jane Doe"},
            }
        )

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.display_name == "Jane Doe"

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "no-sub@example.com"},
            {"sub": str(uuid4())},
            {"sub": "", "email": "a@example.com"},
            {"sub": str(uuid4()), "email": ""},
        ],
    )
    async def test_returns_none_without_sub_or_email(
        self, hs256_provider: JWTAuthProvider, payload: dict
    ):
        assert await hs256_provider.validate_token(_make_hs256_token(payload)) is None

    async def test_returns_none_for_wrong_secret(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token({"sub": str(uuid4()), "email": "a@example.com"}, "other")

        assert await hs256_provider.validate_token(token) is None


# --- _get_jwks_keys ---


class TestGetJwksKeys:
    async def test_returns_empty_dict_without_jwks_url(self):
        with patch.object(jwt_provider_module, "settings") as mock_settings:
            mock_settings.supabase_jwks_url = ""

            assert await _get_jwks_keys() == {}

    async def test_fetches_and_caches_keys(self):
        client = _mock_jwks_client(
            {
                "keys": [
                    {"kid": "key-1", "kty": "EC"},
                    {"kty": "EC"},
                ]
            }
        )

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            result = await _get_jwks_keys()
            client.get.reset_mock()
            cached = await _get_jwks_keys()

        assert list(result) == ["key-1"]
        assert cached == result
        client.get.assert_not_called()

    async def test_returns_empty_dict_on_http_error(self):
        client = _mock_jwks_client({})
        client.get.side_effect = httpx.ConnectError("Connection refused")

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            assert await _get_jwks_keys() == {}

        assert jwt_provider_module._jwks_cache is None


# --- ES256 ---


class TestValidateEs256:
    async def test_returns_none_without_kid(self, hs256_provider: JWTAuthProvider):
        result = await hs256_provider._validate_es256("dummy.token.value", {"alg": "ES256"})

        assert result is None

    async def test_refetches_once_for_unknown_kid(self, hs256_provider: JWTAuthProvider):
        with patch.object(
            jwt_provider_module, "_get_jwks_keys", new_callable=AsyncMock
        ) as mock_get_jwks:
            mock_get_jwks.return_value = {"other-kid": {"kty": "EC"}}

            result = await hs256_provider._validate_es256(
                "dummy.token.value", {"alg": "ES256", "kid": "missing-kid"}
            )

        assert result is None
        assert mock_get_jwks.call_count == 2

    async def test_decodes_with_matching_key(self, hs256_provider: JWTAuthProvider):
        key_data = {"kid": "test-kid", "kty": "EC", "crv": "P-256"}
        payload = {"sub": str(uuid4()), "email": "jane@example.com"}

        with (
            patch.object(
                jwt_provider_module,
                "_get_jwks_keys",
                new_callable=AsyncMock,
                return_value={"test-kid": key_data},
            ),
            patch.object(jwt_provider_module, "ECKey") as mock_eckey_cls,
            patch.object(jwt_provider_module, "jwt") as mock_jwt,
        ):
            mock_jwt.decode.return_value = payload

            result = await hs256_provider._validate_es256(
                "es256.token.value", {"alg": "ES256", "kid": "test-kid"}
            )

        assert result == payload
        mock_eckey_cls.assert_called_once_with(key_data, algorithm="ES256")

    async def test_validate_token_uses_es256_path(self, hs256_provider: JWTAuthProvider):
        user_id = str(uuid4())
        payload = {
            "sub": user_id,
            "email": "jane@example.com",
            "role": "authenticated",
            "user_metadata": {"username": "jane", "name": "Jane"},
        }

        with patch.object(jwt_provider_module, "jwt") as mock_jwt:
            mock_jwt.get_unverified_header.return_value = {"alg": "ES256", "kid": "k1"}
            mock_jwt.JWTError = jose_jwt.JWTError

            with patch.object(
                hs256_provider, "_validate_es256", new_callable=AsyncMock, return_value=payload
            ) as mock_es256:
                result = await hs256_provider.validate_token("es256.token.here")

        mock_es256.assert_called_once_with("es256.token.here", {"alg": "ES256", "kid": "k1"})
        assert result is not None
        assert str(result.id) == user_id
        assert result.username == "jane"
        assert result.display_name == "Jane"
