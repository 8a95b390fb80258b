"""Utilities for issuing and validating application JWTs."""

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Any

import jwt

from ..config import parse_duration
from ..errors import ConfigurationError, InvalidTokenError

_ALGORITHM = "HS256"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Identity carried inside an access token."""

    user_id: str
    email: str


class TokenSigner:
    """Sign and verify HS256 access tokens."""

    def __init__(self, secret: str | None, expires_in: str | int | None) -> None:
        """Validate the signing configuration.

        Parameters
        ----------
        secret:
            HMAC key used for signing and verification.
        expires_in:
            Token lifetime as seconds or a duration string such as ``"1h"``.

        Raises
        ------
        ConfigurationError
            When either value is absent or the lifetime cannot be parsed.
        """
        if not secret:
            raise ConfigurationError("JWT_SECRET environment variable is required")
        if expires_in is None or expires_in == "":
            raise ConfigurationError("JWT_EXPIRES_IN environment variable is required")
        self._secret = secret
        self._expires_in = parse_duration(expires_in)

    @property
    def expires_in(self) -> int:
        return self._expires_in

    def sign(self, claims: TokenClaims) -> str:
        """Create a signed JWT for ``claims`` with issue and expiry times."""
        now = int(time.time())
        payload: dict[str, Any] = {
            "sub": claims.user_id,
            "email": claims.email,
            "iat": now,
            "exp": now + self._expires_in,
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Decode ``token`` and return its claims.

        Raises
        ------
        InvalidTokenError
            For a bad signature, an expired token or a malformed payload alike.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError("Invalid or expired token") from exc

        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise InvalidTokenError("Invalid or expired token")
        return TokenClaims(user_id=payload["sub"], email=email)
