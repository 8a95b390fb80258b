"""Domain-level request contracts shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass

from .account import Account


@dataclass(slots=True)
class RegistrationInput:
    """Validated inputs required to register an account."""

    email: str
    password: str


@dataclass(slots=True)
class LoginInput:
    email: str
    password: str


@dataclass(slots=True)
class AuthResult:
    """Outcome of a successful login: the stored account and its access token."""

    account: Account
    token: str
