"""Unit tests for the JWT handler."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from jose import jwt

from src.shop_common.errors import InvalidCredentialsError, InvalidRefreshTokenError
from src.shop_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)


def test_access_token_claims() -> None:
    payload = jwt.get_unverified_claims(create_access_token("user-123"))
    assert payload["sub"] == "user-123"
    assert payload["type"] == "access"
    assert payload["exp"] > payload["iat"]


def test_refresh_token_claims() -> None:
    payload = jwt.get_unverified_claims(create_refresh_token("user-123"))
    assert payload["type"] == "refresh"


def test_decode_round_trip() -> None:
    payload = decode_token(create_access_token("user-abc"), expected_type="access")
    assert payload["sub"] == "user-abc"


def test_access_token_used_as_refresh_raises_error() -> None:
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(create_access_token("user-abc"), expected_type="refresh")


def test_refresh_token_used_as_access_raises_error() -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_token(create_refresh_token("user-abc"), expected_type="access")


def test_expired_access_token_raises_credentials_error() -> None:
    with patch("src.shop_gateway.auth.jwt_handler._ACCESS_EXPIRE", timedelta(seconds=-1)):
        token = create_access_token("user-abc")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token, expected_type="access")


def test_expired_refresh_token_raises_refresh_error() -> None:
    with patch("src.shop_gateway.auth.jwt_handler._REFRESH_EXPIRE", timedelta(seconds=-1)):
        token = create_refresh_token("user-abc")
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(token, expected_type="refresh")


def test_tampered_token_raises_error() -> None:
    token = create_access_token("user-abc")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token[:-4] + "xxxx", expected_type="access")
