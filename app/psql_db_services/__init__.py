"""
Database Services Package
-------------------------
PostgreSQL services for the auth API.

This package provides:
- Base service class with session handling and validation helpers
- Users service: the credential store (lookup, registration, password checks)
"""

from app.psql_db_services.base_service import BaseDatabaseService
from app.psql_db_services.users_service import UsersService

__all__ = [
    "BaseDatabaseService",
    "UsersService",
]
