"""
Base Database Service
--------------------
Base class for database services with shared session handling,
error logging and validation helpers.
"""

from typing import Optional, List, Dict, Any, AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from app.core.database_connection import DatabaseManager


class BaseDatabaseService:
    """
    Base class for all database service classes.

    Provides shared functionality for database operations including:
    - SQLAlchemy session management
    - Transaction handling with commit/rollback
    - Error handling and logging
    - Common validation utilities
    """

    def __init__(self, database_manager: Optional[DatabaseManager] = None):
        """
        Initialize the database service with a database manager.

        Args:
            database_manager: Optional DatabaseManager instance. If not provided,
                            uses the singleton instance for connection pooling.
        """
        self.database_manager = database_manager or DatabaseManager()
        self._service_name = self.__class__.__name__

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a SQLAlchemy session with automatic commit/rollback.

        Yields:
            AsyncSession: SQLAlchemy session
        """
        async with self.database_manager.get_session() as session:
            yield session

    async def execute_single_query(
        self,
        sql_query: str,
        query_parameters: Optional[Dict[str, Any]] = None,
        fetch_results: bool = True,
    ) -> Optional[List[Dict[str, Any]]]:
        """
        Execute a single SQL query with automatic session management.

        Args:
            sql_query: SQL query string to execute
            query_parameters: Optional dictionary of query parameters
            fetch_results: Whether to fetch and return results (default: True)

        Returns:
            List of result dictionaries if fetch_results is True, None otherwise
        """
        try:
            async with self.get_session() as session:
                result = await session.execute(text(sql_query), query_parameters or {})

                if fetch_results:
                    rows = result.mappings().all()
                    return [dict(row) for row in rows] if rows else []
                return None

        except Exception as error:
            logger.opt(exception=error).error(
                f"{self._service_name}: Error executing query: {error}"
            )
            raise

    # ========================================================================
    # VALIDATION UTILITIES
    # ========================================================================

    def validate_uuid(self, uuid_value: UUID, parameter_name: str = "UUID") -> None:
        """
        Validate that a UUID is not None and is a valid UUID instance.

        Raises:
            ValueError: If UUID is invalid or None
        """
        if uuid_value is None:
            raise ValueError(f"{parameter_name} cannot be None")
        if not isinstance(uuid_value, UUID):
            raise ValueError(f"{parameter_name} must be a valid UUID instance")

    def validate_string_not_empty(
        self, string_value: str, parameter_name: str = "string"
    ) -> None:
        """
        Validate that a string is not None or empty.

        Raises:
            ValueError: If string is None or empty
        """
        if not string_value or not isinstance(string_value, str):
            raise ValueError(f"{parameter_name} must be a non-empty string")
        if not string_value.strip():
            raise ValueError(f"{parameter_name} cannot be only whitespace")

    def log_operation(
        self,
        operation_type: str,
        entity_identifier: Any,
        success: bool = True,
        additional_context: Optional[str] = None,
    ) -> None:
        """
        Log database operations for monitoring and debugging.

        Args:
            operation_type: Type of operation (e.g., "CREATE", "UPDATE", "DELETE")
            entity_identifier: Identifier of the entity being operated on
            success: Whether the operation was successful
            additional_context: Optional additional context information
        """
        log_level = "info" if success else "error"
        status = "succeeded" if success else "failed"

        message = (
            f"{self._service_name}: {operation_type} operation {status} "
            f"for entity: {entity_identifier}"
        )

        if additional_context:
            message += f" - {additional_context}"

        getattr(logger, log_level)(message)
