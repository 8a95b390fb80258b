"""Account service orchestrating persistence, password hashing and token issuance."""

from __future__ import annotations

import logging
from typing import Protocol

from .account import Account
from .contracts import AuthResult, RegistrationInput
from ..errors import DuplicateEmailError, PasswordHashError, bad_request, conflict, not_found
from ..security.passwords import PasswordHasher
from ..security.tokens import TokenClaims, TokenSigner

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "There is already a user with this email."
USER_NOT_FOUND = "User not found."
BAD_CREDENTIALS = "Invalid email or password."


class AccountStore(Protocol):
    def find_by_email(self, email: str) -> Account | None: ...

    def create(self, account: Account) -> Account: ...


class AccountService:
    """Registration and login workflows."""

    def __init__(self, repository: AccountStore, hasher: PasswordHasher, signer: TokenSigner) -> None:
        """Store dependencies used to orchestrate persistence and token issuance."""
        self._repository = repository
        self._hasher = hasher
        self._signer = signer

    def register(self, payload: RegistrationInput) -> Account:
        """Persist a new account, refusing emails that are already registered.

        The existence check completes before hashing. Registrations racing
        past it are caught by the store's unique constraint.
        """
        if self._repository.find_by_email(payload.email) is not None:
            raise conflict(DUPLICATE_EMAIL)

        password_hash = self._hasher.hash(payload.password)
        try:
            account = self._repository.create(Account.draft(payload.email, password_hash))
        except DuplicateEmailError as exc:
            raise conflict(DUPLICATE_EMAIL) from exc

        logger.info("account registered id=%s", account.id)
        return account

    def login(self, email: str, password: str) -> AuthResult:
        """Check credentials and issue an access token."""
        account = self._repository.find_by_email(email)
        if account is None:
            raise not_found(USER_NOT_FOUND)

        try:
            matches = self._hasher.verify(password, account.password_hash)
        except PasswordHashError:
            logger.warning("stored password hash is unusable for account id=%s", account.id)
            matches = False
        if not matches:
            logger.info("login rejected for account id=%s", account.id)
            raise bad_request(BAD_CREDENTIALS)

        token = self._signer.sign(TokenClaims(user_id=str(account.id), email=account.email))
        return AuthResult(account=account, token=token)

    def lookup(self, email: str) -> Account | None:
        return self._repository.find_by_email(email)
