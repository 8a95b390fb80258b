"""Shared-secret verification for service-to-service calls."""

from __future__ import annotations

import hmac

from ..errors import ConfigurationError


class StaticTokenVerifier:
    def __init__(self, token: str | None) -> None:
        if not token:
            raise ConfigurationError("SERVICE_TOKEN environment variable is required")
        self._token = token

    def verify(self, candidate: str) -> bool:
        """Return ``True`` when ``candidate`` equals the configured token."""
        return hmac.compare_digest(candidate.encode("utf-8"), self._token.encode("utf-8"))

    def get_token(self) -> str:
        # internal wiring only; never serialised into a response
        return self._token
