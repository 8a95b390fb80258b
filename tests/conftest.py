from __future__ import annotations

import os
import uuid
from dataclasses import replace
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

# user_service.main builds an app at import time and needs the startup secrets
os.environ.setdefault("JWT_SECRET", "test-secret-with-at-least-32-bytes!!")
os.environ.setdefault("JWT_EXPIRES_IN", "1h")
os.environ.setdefault("SERVICE_TOKEN", "service-secret")

from user_service.config import Settings  # noqa: E402
from user_service.domain.account import Account  # noqa: E402
from user_service.domain.service import AccountService  # noqa: E402
from user_service.errors import DuplicateEmailError  # noqa: E402
from user_service.security.passwords import PasswordHasher  # noqa: E402
from user_service.security.service_token import StaticTokenVerifier  # noqa: E402
from user_service.security.tokens import TokenSigner  # noqa: E402

JWT_SECRET = "test-secret-with-at-least-32-bytes!!"
SERVICE_TOKEN = "service-secret"


class FakeRepository:
    """In-memory repository mimicking the Postgres-backed behaviour."""

    def __init__(self) -> None:
        self.accounts: dict[str, Account] = {}
        self.create_calls = 0

    def find_by_email(self, email: str) -> Account | None:
        account = self.accounts.get(email)
        return replace(account) if account else None

    def create(self, account: Account) -> Account:
        self.create_calls += 1
        if account.email in self.accounts:
            raise DuplicateEmailError(account.email)
        now = datetime.now(timezone.utc)
        stored = replace(account, id=str(uuid.uuid4()), created_at=now, updated_at=now)
        self.accounts[account.email] = stored
        return replace(stored)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jwt_secret=JWT_SECRET,
        jwt_expires_in="1h",
        service_token=SERVICE_TOKEN,
        bcrypt_rounds=4,
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def signer() -> TokenSigner:
    return TokenSigner(JWT_SECRET, "1h")


@pytest.fixture
def service_token() -> StaticTokenVerifier:
    return StaticTokenVerifier(SERVICE_TOKEN)


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def account_service(repository, hasher, signer) -> AccountService:
    return AccountService(repository, hasher, signer)


@pytest.fixture
def app(settings, repository):
    from user_service.main import create_app

    return create_app(settings, repository=repository)


@pytest.fixture
def api_client(app):
    """Provide a FastAPI test client with isolated state."""
    with TestClient(app) as client:
        yield client
