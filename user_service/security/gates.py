"""Request admission checks for protected endpoints.

Each gate is a plain function from the relevant header value(s) to a
:class:`GateResult`. The HTTP layer decides how a rejection is rendered, which
keeps these checks independent of FastAPI.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Sequence

from ..errors import InvalidTokenError
from .service_token import StaticTokenVerifier
from .tokens import TokenClaims, TokenSigner

logger = logging.getLogger(__name__)

NO_TOKEN = "No token provided"
INVALID_FORMAT = "Invalid token format"
NOT_BEARER = "Token must be Bearer type"
INVALID_OR_EXPIRED = "Invalid or expired token"
NO_SERVICE_TOKEN = "No service token provided"
INVALID_SERVICE_TOKEN = "Invalid service token"


@dataclass(frozen=True, slots=True)
class GateResult:
    """Terminal outcome of a gate: admitted, rejected, or failed internally."""

    admitted: bool
    reason: str | None = None
    claims: TokenClaims | None = None
    internal_error: bool = False

    @classmethod
    def admit(cls, claims: TokenClaims | None = None) -> "GateResult":
        return cls(admitted=True, claims=claims)

    @classmethod
    def reject(cls, reason: str) -> "GateResult":
        return cls(admitted=False, reason=reason)

    @classmethod
    def failure(cls) -> "GateResult":
        return cls(admitted=False, reason="Authentication failed", internal_error=True)


def check_bearer(authorization: str | None, verifier: TokenSigner) -> GateResult:
    """Admit a request carrying ``Authorization: Bearer <valid-token>``."""
    try:
        if not authorization:
            return GateResult.reject(NO_TOKEN)

        parts = authorization.split(" ")
        if len(parts) != 2:
            return GateResult.reject(INVALID_FORMAT)

        scheme, token = parts
        if scheme.lower() != "bearer":
            return GateResult.reject(NOT_BEARER)

        try:
            claims = verifier.verify(token)
        except InvalidTokenError:
            return GateResult.reject(INVALID_OR_EXPIRED)
        return GateResult.admit(claims)
    except Exception:
        logger.exception("bearer authentication failed unexpectedly")
        return GateResult.failure()


def check_service_token(values: Sequence[str], verifier: StaticTokenVerifier) -> GateResult:
    """Admit a request whose ``x-token`` header matches the shared secret.

    ``values`` holds every occurrence of the header, so a duplicated header is
    detected rather than silently collapsed.
    """
    try:
        if not values or (len(values) == 1 and not values[0]):
            return GateResult.reject(NO_SERVICE_TOKEN)
        if len(values) != 1 or not isinstance(values[0], str):
            return GateResult.reject(INVALID_FORMAT)
        if not verifier.verify(values[0]):
            return GateResult.reject(INVALID_SERVICE_TOKEN)
        return GateResult.admit()
    except Exception:
        logger.exception("service authentication failed unexpectedly")
        return GateResult.failure()
