"""Database repository for user account data."""

from __future__ import annotations

import logging
import time

import psycopg
from psycopg import errors
from psycopg.rows import tuple_row
from psycopg_pool import ConnectionPool

from .domain.account import Account
from .errors import DuplicateEmailError

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""

_COLUMNS = "id, email, password_hash, created_at, updated_at"


class AccountRepository:
    """Postgres-backed account persistence."""

    def __init__(self, pool: ConnectionPool) -> None:
        """Store the connection pool used for all database interactions."""
        self._pool = pool

    def ensure_schema(self) -> None:
        """Create the ``users`` table when it does not exist yet."""
        with self._pool.connection() as conn:
            conn.execute(_SCHEMA)
            conn.commit()

    def find_by_email(self, email: str) -> Account | None:
        """Return the account stored under ``email`` (exact match) or ``None``."""
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email = %s", (email,))
                row = cur.fetchone()
        if not row:
            return None
        return self._map_record(row)

    def create(self, account: Account) -> Account:
        """Insert a draft account and return it with its store-assigned id.

        Raises
        ------
        DuplicateEmailError
            When another account already holds the same email.
        """
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                try:
                    cur.execute(
                        f"""
                        INSERT INTO users (email, password_hash)
                        VALUES (%s, %s)
                        RETURNING {_COLUMNS}
                        """,
                        (account.email, account.password_hash),
                    )
                except errors.UniqueViolation as exc:
                    raise DuplicateEmailError(account.email) from exc
                row = cur.fetchone()
            conn.commit()
        return self._map_record(row)

    def _map_record(self, row: tuple) -> Account:
        """Convert a raw database tuple into the domain ``Account`` dataclass."""
        return Account(
            id=str(row[0]),
            email=row[1],
            password_hash=row[2],
            created_at=row[3],
            updated_at=row[4],
        )


def verify_connection(pool: ConnectionPool, *, max_retries: int = 5, retry_delay: float = 1.0) -> None:
    """Block until the database answers a trivial query.

    Each failed attempt is logged and followed by ``retry_delay`` seconds of
    sleep; the last failure propagates so startup aborts.
    """
    retries = max_retries
    while True:
        try:
            with pool.connection() as conn:
                conn.execute("SELECT 1")
            logger.info("database connection verified")
            return
        except psycopg.OperationalError:
            retries -= 1
            if retries <= 0:
                raise
            logger.warning("database connection test failed, retrying... (%d left)", retries)
            time.sleep(retry_delay)
