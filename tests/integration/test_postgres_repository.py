"""
Integration tests for PostgresAccountRepository.

Tests repository operations against a real PostgreSQL database.
Requires PostgreSQL to be running and reachable at DATABASE_URL.
"""

import threading
from collections.abc import Generator
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from src.config.settings import get_settings
from src.domain.account import Account
from src.domain.exceptions import DuplicateEmail, DuplicatePhone
from src.domain.ports import AccountStatus

pytestmark = pytest.mark.integration


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for integration tests."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresAccountRepository:
    """Create repository instance for each test."""
    return PostgresAccountRepository(pool)


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean accounts table before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM accounts")
        conn.commit()
    yield


def make_account(email: str = "pg@example.com", phone: str | None = "5141234567") -> Account:
    return Account(
        given_name="Jean",
        family_name="Dupont",
        email=email,
        phone=phone,
        birth_date=date(1990, 5, 15),
        address="123 Rue de la Paix, Montreal",
        password_hash="$2b$04$abcdefghijklmnopqrstuuJ6R8BvU3pu7GxVJ0TObDrQvh6S0rYeC",
    )


class TestInsert:
    """Tests for inserting new accounts."""

    def test_insert_returns_persisted_account(
        self, repository: PostgresAccountRepository
    ) -> None:
        saved = repository.save(make_account())

        assert saved.id is not None
        assert saved.created_at is not None
        assert saved.status == AccountStatus.PENDING
        assert saved.birth_date == date(1990, 5, 15)

    def test_find_by_email_round_trip(self, repository: PostgresAccountRepository) -> None:
        saved = repository.save(make_account())
        found = repository.find_by_email("pg@example.com")
        assert found == saved

    def test_find_unknown_email(self, repository: PostgresAccountRepository) -> None:
        assert repository.find_by_email("missing@example.com") is None

    def test_exists_checks(self, repository: PostgresAccountRepository) -> None:
        repository.save(make_account())
        assert repository.exists_by_email("pg@example.com") is True
        assert repository.exists_by_email("other@example.com") is False
        assert repository.exists_by_phone("5141234567") is True
        assert repository.exists_by_phone("4181234567") is False

    def test_duplicate_email_maps_to_domain_error(
        self, repository: PostgresAccountRepository
    ) -> None:
        repository.save(make_account(phone=None))
        with pytest.raises(DuplicateEmail):
            repository.save(make_account(phone=None))

    def test_duplicate_phone_maps_to_domain_error(
        self, repository: PostgresAccountRepository
    ) -> None:
        repository.save(make_account("one@example.com"))
        with pytest.raises(DuplicatePhone):
            repository.save(make_account("two@example.com"))

    def test_null_phones_never_conflict(self, repository: PostgresAccountRepository) -> None:
        repository.save(make_account("one@example.com", phone=None))
        repository.save(make_account("two@example.com", phone=None))


class TestUpdate:
    """Tests for updating verification flags and status."""

    def test_update_persists_flags_and_status(
        self, repository: PostgresAccountRepository
    ) -> None:
        saved = repository.save(make_account())
        saved.email_verified = True
        saved.advance_to(AccountStatus.ACTIVE)

        repository.save(saved)

        found = repository.find_by_email("pg@example.com")
        assert found.email_verified is True
        assert found.phone_verified is False
        assert found.status == AccountStatus.ACTIVE

    def test_update_unknown_id_raises(self, repository: PostgresAccountRepository) -> None:
        ghost = make_account()
        ghost.id = 999_999
        with pytest.raises(LookupError):
            repository.save(ghost)


class TestConcurrentInsert:
    """The UNIQUE constraint settles concurrent inserts of the same email."""

    def test_concurrent_inserts_exactly_one_succeeds(
        self, repository: PostgresAccountRepository, pool: ConnectionPool
    ) -> None:
        results: list[bool] = []
        lock = threading.Lock()

        def insert() -> None:
            try:
                repository.save(make_account(phone=None))
                outcome = True
            except DuplicateEmail:
                outcome = False
            with lock:
                results.append(outcome)

        with ThreadPoolExecutor(max_workers=10) as executor:
            for f in [executor.submit(insert) for _ in range(10)]:
                f.result()

        assert results.count(True) == 1

        with pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM accounts WHERE email = %s", ("pg@example.com",))
            assert cursor.fetchone()[0] == 1
