"""Repository adapters - Account persistence implementations."""

from .memory import InMemoryAccountRepository
from .postgres import PostgresAccountRepository, run_migrations

__all__ = ["InMemoryAccountRepository", "PostgresAccountRepository", "run_migrations"]
