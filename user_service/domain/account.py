from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Account:
    """Aggregate root for a registered user identity.

    An account without ``id`` is a draft that has not been stored yet.
    """

    email: str
    password_hash: str
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def draft(cls, email: str, password_hash: str) -> "Account":
        return cls(email=email, password_hash=password_hash)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None
