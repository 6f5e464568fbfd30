"""Unit tests for JWT handler."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from jose import jwt

from src.ft_common.errors import InvalidCredentialsError, InvalidRefreshTokenError
from src.ft_gateway.auth.jwt_handler import (
    ACCESS,
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
)


def test_access_token_contains_correct_claims() -> None:
    token = create_access_token("user-123")
    # Decode without verification to inspect claims
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "user-123"
    assert payload["type"] == "access"
    assert "role" not in payload


def test_refresh_token_contains_correct_claims() -> None:
    token = create_refresh_token("user-123")
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "user-123"
    assert payload["type"] == "refresh"


def test_decode_valid_access_token() -> None:
    token = create_access_token("user-abc")
    payload = decode_token(token, expected_type=ACCESS)
    assert payload["sub"] == "user-abc"


def test_decode_valid_refresh_token() -> None:
    token = create_refresh_token("user-abc")
    payload = decode_token(token, expected_type=REFRESH)
    assert payload["sub"] == "user-abc"


def test_access_token_used_as_refresh_raises_error() -> None:
    token = create_access_token("user-abc")
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(token, expected_type=REFRESH)


def test_refresh_token_used_as_access_raises_error() -> None:
    token = create_refresh_token("user-abc")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token, expected_type=ACCESS)


def test_expired_access_token_raises_credentials_error() -> None:
    with patch(
        "src.ft_gateway.auth.jwt_handler._ACCESS_EXPIRE",
        timedelta(seconds=-1),
    ):
        token = create_access_token("user-abc")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token, expected_type=ACCESS)


def test_expired_refresh_token_raises_refresh_error() -> None:
    with patch(
        "src.ft_gateway.auth.jwt_handler._REFRESH_EXPIRE",
        timedelta(seconds=-1),
    ):
        token = create_refresh_token("user-abc")
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(token, expected_type=REFRESH)


def test_tampered_token_raises_error() -> None:
    token = create_access_token("user-abc")
    tampered = token[:-4] + "xxxx"
    with pytest.raises(InvalidCredentialsError):
        decode_token(tampered, expected_type=ACCESS)


def test_token_signed_with_other_secret_rejected() -> None:
    forged = jwt.encode({"sub": "user-abc", "type": "access"}, "not-the-secret", algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        decode_token(forged, expected_type=ACCESS)
