from __future__ import annotations

import pytest

from user_service.domain.account import Account
from user_service.domain.contracts import RegistrationInput
from user_service.domain.service import AccountService
from user_service.errors import AppError, DuplicateEmailError, ErrorKind


class CountingHasher:
    def __init__(self, hasher) -> None:
        self._hasher = hasher
        self.hash_calls = 0

    def hash(self, plaintext):
        self.hash_calls += 1
        return self._hasher.hash(plaintext)

    def verify(self, plaintext, hashed):
        return self._hasher.verify(plaintext, hashed)


def test_register_persists_hashed_password(account_service, repository):
    account = account_service.register(RegistrationInput(email="a@b.com", password="secret1"))
    assert account.is_persisted
    assert account.created_at is not None
    assert repository.accounts["a@b.com"].password_hash != "secret1"


def test_register_twice_conflicts_without_hashing(repository, hasher, signer):
    counting = CountingHasher(hasher)
    service = AccountService(repository, counting, signer)
    service.register(RegistrationInput(email="a@b.com", password="secret1"))

    with pytest.raises(AppError) as excinfo:
        service.register(RegistrationInput(email="a@b.com", password="another1"))
    assert excinfo.value.kind is ErrorKind.CONFLICT
    assert excinfo.value.code == "CONFLICT_ERROR"
    assert counting.hash_calls == 1
    assert repository.create_calls == 1


def test_register_is_case_sensitive(account_service):
    account_service.register(RegistrationInput(email="a@b.com", password="secret1"))
    account = account_service.register(RegistrationInput(email="A@b.com", password="secret1"))
    assert account.email == "A@b.com"


def test_register_lost_race_is_a_conflict(account_service, repository, monkeypatch):
    def create(account):
        raise DuplicateEmailError(account.email)

    monkeypatch.setattr(repository, "create", create)
    with pytest.raises(AppError) as excinfo:
        account_service.register(RegistrationInput(email="a@b.com", password="secret1"))
    assert excinfo.value.kind is ErrorKind.CONFLICT


def test_login_issues_verifiable_token(account_service, signer):
    registered = account_service.register(RegistrationInput(email="a@b.com", password="secret1"))
    result = account_service.login("a@b.com", "secret1")

    assert result.account.id == registered.id
    claims = signer.verify(result.token)
    assert claims.user_id == registered.id
    assert claims.email == "a@b.com"


def test_login_unknown_email(account_service):
    with pytest.raises(AppError) as excinfo:
        account_service.login("nobody@x.com", "x")
    assert excinfo.value.kind is ErrorKind.NOT_FOUND
    assert excinfo.value.status_code == 404


def test_login_wrong_password_leaves_hash_untouched(account_service, repository):
    account_service.register(RegistrationInput(email="a@b.com", password="secret1"))
    stored_hash = repository.accounts["a@b.com"].password_hash

    with pytest.raises(AppError) as excinfo:
        account_service.login("a@b.com", "wrong")
    assert excinfo.value.kind is ErrorKind.BAD_REQUEST
    assert excinfo.value.message == "Invalid email or password."
    assert stored_hash not in excinfo.value.message
    assert repository.accounts["a@b.com"].password_hash == stored_hash


def test_login_with_corrupt_hash_is_bad_credentials(account_service, repository):
    repository.accounts["a@b.com"] = Account(email="a@b.com", password_hash="corrupt", id="user-1")
    with pytest.raises(AppError) as excinfo:
        account_service.login("a@b.com", "secret1")
    assert excinfo.value.kind is ErrorKind.BAD_REQUEST


def test_lookup(account_service):
    assert account_service.lookup("a@b.com") is None
    account_service.register(RegistrationInput(email="a@b.com", password="secret1"))
    assert account_service.lookup("a@b.com").email == "a@b.com"


def test_draft_account_is_not_persisted():
    draft = Account.draft("a@b.com", "hash")
    assert not draft.is_persisted
    assert draft.created_at is None
