"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Uniqueness
----------
Email and phone uniqueness are backed by UNIQUE constraints on the
accounts table (NULL phones never conflict). The domain checks
exists_by_email / exists_by_phone first for a clean error, and save()
maps a UniqueViolation raised by a concurrent insert to the same
domain exceptions, so a lost race is reported instead of corrupting data.
"""

import logging
from pathlib import Path
from typing import Any

from psycopg.errors import UniqueViolation
from psycopg_pool import ConnectionPool

from src.domain.account import Account
from src.domain.exceptions import DuplicateEmail, DuplicatePhone
from src.domain.ports import AccountStatus

logger = logging.getLogger(__name__)

_PHONE_CONSTRAINT = "accounts_phone_key"

_COLUMNS = """
    id, given_name, family_name, email, phone, birth_date, address,
    password_hash, email_verified, phone_verified, status, created_at
"""


def _row_to_account(row: tuple[Any, ...]) -> Account:
    return Account(
        id=row[0],
        given_name=row[1],
        family_name=row[2],
        email=row[3],
        phone=row[4],
        birth_date=row[5],
        address=row[6],
        password_hash=row[7],
        email_verified=row[8],
        phone_verified=row[9],
        status=AccountStatus(row[10]),
        created_at=row[11],
    )


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_email(self, email: str) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE email = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()
        return _row_to_account(row) if row is not None else None

    def exists_by_email(self, email: str) -> bool:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT 1 FROM accounts WHERE email = %s", (email,))
            return cursor.fetchone() is not None

    def exists_by_phone(self, phone: str) -> bool:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT 1 FROM accounts WHERE phone = %s", (phone,))
            return cursor.fetchone() is not None

    def save(self, account: Account) -> Account:
        """
        Insert (id is None) or update an account.

        Inserts let the database assign id and, when absent, created_at.
        Updates only touch the mutable verification columns and status.

        Raises:
            DuplicateEmail: Insert violated the email UNIQUE constraint
            DuplicatePhone: Insert violated the phone UNIQUE constraint
        """
        if account.id is None:
            return self._insert(account)
        return self._update(account)

    def _insert(self, account: Account) -> Account:
        sql = f"""
            INSERT INTO accounts (
                given_name, family_name, email, phone, birth_date, address,
                password_hash, email_verified, phone_verified, status, created_at
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, COALESCE(%s, NOW()))
            RETURNING {_COLUMNS}
        """
        params = (
            account.given_name,
            account.family_name,
            account.email,
            account.phone,
            account.birth_date,
            account.address,
            account.password_hash,
            account.email_verified,
            account.phone_verified,
            account.status.value,
            account.created_at,
        )

        with self._pool.connection() as conn, conn.cursor() as cursor:
            try:
                cursor.execute(sql, params)
            except UniqueViolation as e:
                conn.rollback()
                if e.diag.constraint_name == _PHONE_CONSTRAINT:
                    raise DuplicatePhone(account.phone) from None
                raise DuplicateEmail(account.email) from None
            row = cursor.fetchone()
            conn.commit()
        return _row_to_account(row)

    def _update(self, account: Account) -> Account:
        sql = f"""
            UPDATE accounts
            SET email_verified = %s, phone_verified = %s, status = %s
            WHERE id = %s
            RETURNING {_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                sql,
                (account.email_verified, account.phone_verified, account.status.value, account.id),
            )
            row = cursor.fetchone()
            conn.commit()
        if row is None:
            raise LookupError(f"Account {account.id} does not exist")
        return _row_to_account(row)


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
