"""FastAPI dependencies wiring gates and services into routes."""

from __future__ import annotations

from fastapi import Request

from ..domain.service import AccountService
from ..security.gates import check_bearer, check_service_token
from ..security.tokens import TokenClaims
from .errors import GateRejected

SERVICE_TOKEN_HEADER = "x-token"


def get_service(request: Request) -> AccountService:
    """Resolve the `AccountService` stored on the FastAPI application state."""
    service: AccountService = request.app.state.account_service
    return service


def require_user(request: Request) -> TokenClaims:
    """Admit requests with a valid bearer token and expose its claims."""
    result = check_bearer(request.headers.get("authorization"), request.app.state.token_signer)
    if not result.admitted:
        raise GateRejected(result, challenge="Bearer")
    request.state.user = result.claims
    return result.claims


def require_service(request: Request) -> None:
    """Admit requests presenting the shared service token."""
    result = check_service_token(
        request.headers.getlist(SERVICE_TOKEN_HEADER),
        request.app.state.service_token,
    )
    if not result.admitted:
        raise GateRejected(result)
