"""
Tests for the authentication dependencies.

JWKS lookups and JWT decoding are mocked; no network calls are made.
"""

import pytest
from fastapi import HTTPException
from unittest.mock import MagicMock, patch
from jwt.exceptions import ExpiredSignatureError, InvalidSignatureError, PyJWKClientError

from storefront.auth.dependencies import (
    AuthenticatedUser,
    get_authenticated_user,
    get_optional_user,
)


@pytest.fixture
def mock_jwks():
    """Patch the JWKS client so signing key resolution never hits the network."""
    with patch("storefront.auth.dependencies.get_jwks_client") as mock:
        mock.return_value.get_signing_key_from_jwt.return_value = MagicMock(key="public-key")
        yield mock


class TestGetAuthenticatedUser:

    @pytest.mark.asyncio
    async def test_valid_token(self, mock_jwks):
        with patch("storefront.auth.dependencies.decode", return_value={"sub": "user-123"}) as mock_decode:
            user = await get_authenticated_user(authorization="Bearer good-token")

        assert user == AuthenticatedUser(user_id="user-123", access_token="good-token")
        kwargs = mock_decode.call_args.kwargs
        assert kwargs["algorithms"] == ["ES256"]
        assert kwargs["audience"] == "authenticated"
        assert kwargs["issuer"].endswith("/auth/v1")

    @pytest.mark.asyncio
    async def test_missing_header(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_authenticated_user(authorization=None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail["error"] == "unauthorized"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", ["good-token", "Basic abc", "Bearer a b"])
    async def test_malformed_header(self, header):
        with pytest.raises(HTTPException) as exc_info:
            await get_authenticated_user(authorization=header)

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_expired_token(self, mock_jwks):
        with patch("storefront.auth.dependencies.decode", side_effect=ExpiredSignatureError()):
            with pytest.raises(HTTPException) as exc_info:
                await get_authenticated_user(authorization="Bearer old-token")

        assert exc_info.value.detail["error"] == "token_expired"

    @pytest.mark.asyncio
    async def test_bad_signature(self, mock_jwks):
        with patch("storefront.auth.dependencies.decode", side_effect=InvalidSignatureError()):
            with pytest.raises(HTTPException) as exc_info:
                await get_authenticated_user(authorization="Bearer forged-token")

        assert exc_info.value.detail["error"] == "invalid_token"

    @pytest.mark.asyncio
    async def test_jwks_failure(self, mock_jwks):
        mock_jwks.return_value.get_signing_key_from_jwt.side_effect = PyJWKClientError("no key")

        with pytest.raises(HTTPException) as exc_info:
            await get_authenticated_user(authorization="Bearer some-token")

        assert exc_info.value.detail["error"] == "jwks_error"

    @pytest.mark.asyncio
    async def test_missing_sub_claim(self, mock_jwks):
        with patch("storefront.auth.dependencies.decode", return_value={"aud": "authenticated"}):
            with pytest.raises(HTTPException) as exc_info:
                await get_authenticated_user(authorization="Bearer token")

        assert exc_info.value.status_code == 401


class TestGetOptionalUser:

    @pytest.mark.asyncio
    async def test_no_header_is_signed_out(self):
        assert await get_optional_user(authorization=None) is None

    @pytest.mark.asyncio
    async def test_valid_token(self, mock_jwks):
        with patch("storefront.auth.dependencies.decode", return_value={"sub": "user-123"}):
            user = await get_optional_user(authorization="Bearer good-token")

        assert user.user_id == "user-123"

    @pytest.mark.asyncio
    async def test_invalid_header_still_rejected(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_optional_user(authorization="nonsense")

        assert exc_info.value.status_code == 401
