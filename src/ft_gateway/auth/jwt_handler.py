"""JWT issue and verification (HS256, shared JWT_SECRET).

Tokens carry only the user id (``sub``) and the token type. Role and
active status are re-read from the database on every request, so a role
change or deactivation takes effect before the token expires.

No revocation list: a token stays valid until ``exp``.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.ft_common.errors import InvalidCredentialsError, InvalidRefreshTokenError

_ALGORITHM = settings.JWT_ALGORITHM
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_REFRESH_EXPIRE = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)

ACCESS = "access"
REFRESH = "refresh"


def _issue(user_id: str, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(UTC)
    claims = {
        "sub": user_id,
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
    }
    return str(jwt.encode(claims, settings.JWT_SECRET, algorithm=_ALGORITHM))


def create_access_token(user_id: str) -> str:
    """Short-lived bearer token for API calls."""
    return _issue(user_id, ACCESS, _ACCESS_EXPIRE)


def create_refresh_token(user_id: str) -> str:
    """Long-lived token accepted only by /auth/refresh."""
    return _issue(user_id, REFRESH, _REFRESH_EXPIRE)


def decode_token(token: str, expected_type: str) -> dict[str, str]:
    """Verify signature, expiry and token type; return the claims.

    Raises InvalidCredentialsError for access tokens and
    InvalidRefreshTokenError for refresh tokens.
    """
    error = InvalidCredentialsError if expected_type == ACCESS else InvalidRefreshTokenError
    try:
        claims: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise error() from None

    # Strict type check stops a refresh token being used as an access token
    if claims.get("type") != expected_type:
        raise error()
    return claims
