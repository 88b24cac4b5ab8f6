"""
PostgreSQL repository adapter - Implements UserRepository protocol.

This module provides the PostgreSQL implementation of the domain's
credential store port using psycopg3 with raw SQL.

Email uniqueness is enforced by the UNIQUE constraint on users.email.
create() uses INSERT ... ON CONFLICT DO NOTHING so that two concurrent
registrations for the same email produce exactly one row, and the loser
sees None instead of an exception.
"""

import logging
from pathlib import Path

from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from otpauth.domain.ports import UserRecord

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, name, email, password_hash, verified, created_at"

MIGRATIONS_DIR = Path(__file__).parent / "migrations"


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

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

    def find_by_email(self, email: str) -> UserRecord | None:
        """
        Fetch a user by exact email match.

        Args:
            email: Email as stored (case-sensitive)

        Returns:
            UserRecord or None if no such user
        """
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s"

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()

        return UserRecord(**row) if row is not None else None

    def create(
        self, name: str, email: str, password_hash: str, verified: bool
    ) -> UserRecord | None:
        """
        Atomically insert a new user.

        Args:
            name: Display name
            email: Email address (unique)
            password_hash: bcrypt hash from the domain layer
            verified: Verification flag

        Returns:
            The created UserRecord, or None if the email already exists
        """
        sql = f"""
            INSERT INTO users (name, email, password_hash, verified, created_at)
            VALUES (%s, %s, %s, %s, NOW())
            ON CONFLICT (email) DO NOTHING
            RETURNING {_USER_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, (name, email, password_hash, verified))
            row = cursor.fetchone()
            conn.commit()

        return UserRecord(**row) if row is not None else None


def run_migrations(pool: ConnectionPool, migrations_dir: Path = MIGRATIONS_DIR) -> None:
    """
    Apply the bundled SQL migrations in filename order.

    The files ship inside the package, so they are found the same way from
    a source checkout and from an installed wheel. Each file must be
    idempotent (CREATE ... IF NOT EXISTS): all of them run on every start.

    Raises:
        RuntimeError: If no migration files are found or one of them fails
    """
    sql_files = sorted(migrations_dir.glob("*.sql"))
    if not sql_files:
        logger.error("No migration files in %s", migrations_dir)
        raise RuntimeError(f"No database migrations found in {migrations_dir}")

    for sql_file in sql_files:
        logger.info("Applying migration %s", sql_file.name)
        try:
            with pool.connection() as conn:
                conn.execute(sql_file.read_text())
        except Exception as e:
            logger.error("Migration %s failed: %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e

    logger.info("Applied %d migration(s)", len(sql_files))
