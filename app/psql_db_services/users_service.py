"""
PostgreSQL Credential Store
---------------------------
Database service for user identities: lookup by email or id, password
verification and registration. Email is unique, enforced both by an
existence check and by the table's UNIQUE constraint.
"""

from typing import Optional, Dict, Any
from uuid import UUID
from datetime import datetime, timezone

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from loguru import logger

from app.auth.exceptions import EmailAlreadyExistsError
from app.core.database_connection import DatabaseManager
from app.psql_db_services.base_service import BaseDatabaseService
from app.utils.password_hashing import PasswordHasher


USERS_TABLE_DDL = """
    CREATE TABLE IF NOT EXISTS users (
        user_id UUID PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        email VARCHAR(255) NOT NULL UNIQUE,
        password_hash VARCHAR(255) NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
"""


def normalize_email(email: str) -> str:
    """Canonical form used for every stored and looked-up email."""
    return email.strip().lower()


class UsersService(BaseDatabaseService):
    """
    Credential store backed by the ``users`` table.

    Records are returned as plain dictionaries, including ``password_hash``;
    response models strip it before anything leaves the API.
    """

    def __init__(self, database_manager: Optional[DatabaseManager] = None):
        super().__init__(database_manager)

    async def ensure_schema(self) -> None:
        """Create the users table if it does not exist yet."""
        await self.execute_single_query(USERS_TABLE_DDL, fetch_results=False)
        logger.info("Users table schema verified")

    # ========================================================================
    # VALIDATION HELPERS
    # ========================================================================

    async def check_email_exists(self, email: str) -> bool:
        """Check if email already exists in database"""
        try:
            async with self.get_session() as session:
                sql_query = "SELECT 1 FROM users WHERE email = :email LIMIT 1"
                result = await session.execute(
                    text(sql_query), {"email": normalize_email(email)}
                )
                return result.first() is not None
        except Exception as e:
            logger.error(f"Error checking email existence: {e}")
            raise

    # ========================================================================
    # CREATE OPERATIONS
    # ========================================================================

    async def create_user(
        self,
        user_id: UUID,
        name: str,
        email: str,
        password_hash: str,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Create a new user record in the database.

        Args:
            user_id: Unique user identifier (UUID)
            name: Display name
            email: User's email address (stored lowercased, must be unique)
            password_hash: bcrypt hash of the password
            created_at: Creation timestamp (defaults to now)
            updated_at: Update timestamp (defaults to now)

        Returns:
            Dictionary containing the created user record

        Raises:
            EmailAlreadyExistsError: If email is already registered
            ValueError: If a required field is empty
            sqlalchemy.exc.SQLAlchemyError: On database errors
        """
        self.validate_uuid(user_id, "user_id")
        self.validate_string_not_empty(name, "name")
        self.validate_string_not_empty(email, "email")
        self.validate_string_not_empty(password_hash, "password_hash")
        email = normalize_email(email)

        if await self.check_email_exists(email):
            raise EmailAlreadyExistsError(f"Email '{email}' already exists")

        now = datetime.now(timezone.utc)
        created_at = created_at or now
        updated_at = updated_at or now

        try:
            async with self.get_session() as session:
                sql_query = """
                    INSERT INTO users (
                        user_id, name, email, password_hash, created_at, updated_at
                    )
                    VALUES (
                        :user_id, :name, :email, :password_hash, :created_at, :updated_at
                    )
                    RETURNING user_id, name, email, created_at, updated_at
                """

                params = {
                    "user_id": user_id,
                    "name": name,
                    "email": email,
                    "password_hash": password_hash,
                    "created_at": created_at,
                    "updated_at": updated_at,
                }

                result = await session.execute(text(sql_query), params)
                created_user = result.mappings().one_or_none()

                if not created_user:
                    raise RuntimeError("Failed to create user record")

                self.log_operation("CREATE", user_id)
                return dict(created_user)

        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            logger.warning(f"Unique constraint rejected user {email}: {e.orig}")
            raise EmailAlreadyExistsError(f"Email '{email}' already exists") from e
        except Exception as e:
            logger.error(f"Error creating user {email}: {e}")
            raise

    # ========================================================================
    # READ OPERATIONS
    # ========================================================================

    async def get_user_by_id(self, user_id: UUID) -> Optional[Dict[str, Any]]:
        """
        Retrieve a user by their unique identifier.

        Args:
            user_id: User's unique UUID identifier

        Returns:
            Dictionary containing user record or None if not found

        Raises:
            sqlalchemy.exc.SQLAlchemyError: On database errors
            ValueError: If user_id is invalid
        """
        self.validate_uuid(user_id, "user_id")

        try:
            async with self.get_session() as session:
                sql_query = """
                    SELECT * FROM users
                    WHERE user_id = :user_id
                """
                result = await session.execute(text(sql_query), {"user_id": user_id})
                user_record = result.mappings().one_or_none()
                return dict(user_record) if user_record else None
        except Exception as e:
            logger.error(f"Error fetching user {user_id}: {e}")
            raise

    async def get_user_by_email(self, email_address: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve a user by their email address.

        Args:
            email_address: Email to look up (compared case-insensitively)

        Returns:
            Dictionary containing user record or None if not found
        """
        self.validate_string_not_empty(email_address, "email_address")

        try:
            async with self.get_session() as session:
                sql_query = """
                    SELECT * FROM users
                    WHERE email = :email
                """
                result = await session.execute(
                    text(sql_query), {"email": normalize_email(email_address)}
                )
                user_record = result.mappings().one_or_none()
                return dict(user_record) if user_record else None
        except Exception as e:
            logger.error(f"Error fetching user by email: {e}")
            raise

    # ========================================================================
    # CREDENTIAL CHECKS
    # ========================================================================

    def verify_password(self, user: Dict[str, Any], plaintext_password: str) -> bool:
        """Check a plaintext password against the user's stored hash."""
        password_hash = user.get("password_hash")
        if not password_hash:
            return False
        return PasswordHasher.verify_password(plaintext_password, password_hash)
