"""bcrypt-backed password hashing."""

from __future__ import annotations

import bcrypt

from ..errors import PasswordHashError

DEFAULT_ROUNDS = 10
# bcrypt ignores input past 72 bytes; newer releases reject it outright.
_MAX_SECRET_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_MAX_SECRET_BYTES]


class PasswordHasher:
    """Salted one-way hashing with a fixed work factor."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, plaintext: str) -> str:
        """Return a bcrypt hash with a freshly generated, embedded salt."""
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_encode(plaintext), salt).decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Check ``plaintext`` against ``hashed`` in constant time.

        Raises
        ------
        PasswordHashError
            When ``hashed`` is not a usable bcrypt hash.
        """
        try:
            return bcrypt.checkpw(_encode(plaintext), hashed.encode("utf-8"))
        except (ValueError, TypeError, AttributeError) as exc:
            raise PasswordHashError("malformed password hash") from exc
