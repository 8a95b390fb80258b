"""HTTP route definitions for the user service."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import BaseModel

from ..domain.account import Account
from ..domain.service import USER_NOT_FOUND, AccountService
from ..errors import not_found
from ..security.tokens import TokenClaims
from .deps import get_service, require_service, require_user
from .validators import validate_login, validate_registration

router = APIRouter(prefix="/users", tags=["users"])


class AccountResponse(BaseModel):
    """Serialised representation of an `Account`; the password hash is never included."""

    id: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, account: Account) -> "AccountResponse":
        """Build a response model from the domain aggregate."""
        return cls(
            id=str(account.id),
            email=account.email,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class CreateUserResponse(BaseModel):
    id: str
    email: str


class AuthenticateResponse(BaseModel):
    """Login response carrying the account and its bearer token."""

    user: AccountResponse
    token: str


class CurrentUserResponse(BaseModel):
    id: str
    email: str


@router.post("/create", response_model=CreateUserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: Any = Body(default=None),
    service: AccountService = Depends(get_service),
) -> CreateUserResponse:
    """Register an account from an email/password pair."""
    account = service.register(validate_registration(payload))
    return CreateUserResponse(id=str(account.id), email=account.email)


@router.post("/authenticate", response_model=AuthenticateResponse)
def authenticate_user(
    payload: Any = Body(default=None),
    service: AccountService = Depends(get_service),
) -> AuthenticateResponse:
    """Exchange valid credentials for a signed access token."""
    credentials = validate_login(payload)
    result = service.login(credentials.email, credentials.password)
    return AuthenticateResponse(user=AccountResponse.from_domain(result.account), token=result.token)


@router.get("/me", response_model=CurrentUserResponse)
def current_user(claims: TokenClaims = Depends(require_user)) -> CurrentUserResponse:
    """Return the identity carried by the caller's bearer token."""
    return CurrentUserResponse(id=claims.user_id, email=claims.email)


@router.get("/lookup", response_model=AccountResponse, dependencies=[Depends(require_service)])
def lookup_user(
    email: str = Query(..., min_length=1),
    service: AccountService = Depends(get_service),
) -> AccountResponse:
    """Resolve an account by email for trusted internal callers."""
    account = service.lookup(email)
    if account is None:
        raise not_found(USER_NOT_FOUND)
    return AccountResponse.from_domain(account)
