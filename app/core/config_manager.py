"""
Configuration Manager
--------------------
Centralized configuration management using Pydantic Settings.
All application settings are loaded from environment variables with validation.
"""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


SYMMETRIC_JWT_ALGORITHMS = ["HS256", "HS384", "HS512"]
ASYMMETRIC_JWT_ALGORITHMS = ["RS256", "RS384", "RS512", "ES256", "ES384", "ES512"]


class ApplicationSettings(BaseSettings):
    """Main application configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application metadata
    app_name: str = Field(default="JWT Auth API", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    log_file_path: Optional[str] = Field(
        default="logs/app_{time:YYYY-MM-DD}.log",
        description="Rotating log file path (empty disables file logging)",
    )

    # FastAPI server configuration
    fastapi_host: str = Field(default="0.0.0.0", description="FastAPI host")
    fastapi_port: int = Field(default=8000, description="FastAPI port")

    # PostgreSQL database configuration
    database_host: str = Field(default="localhost", description="PostgreSQL host")
    database_port: int = Field(default=5432, description="PostgreSQL port")
    database_user: str = Field(default="myuser", description="PostgreSQL user")
    database_password: str = Field(
        default="mypassword", description="PostgreSQL password"
    )
    database_name: str = Field(default="mydb", description="PostgreSQL database name")
    database_pool_size: int = Field(default=20, description="Connection pool size")
    database_max_overflow: int = Field(
        default=10, description="Max overflow connections"
    )

    # Redis configuration
    redis_host: str = Field(default="localhost", description="Redis host")
    redis_port: int = Field(default=6379, description="Redis port")
    redis_db: int = Field(default=0, description="Redis database number")
    redis_password: Optional[str] = Field(default=None, description="Redis password")
    redis_max_connections: int = Field(default=50, description="Redis max connections")

    # JWT configuration
    jwt_secret_key: str = Field(
        default="change-this-secret-in-production",
        description="Shared secret for HMAC token signing",
    )
    jwt_private_key: Optional[str] = Field(
        default=None, description="PEM private key for RSA/EC token signing"
    )
    jwt_public_key: Optional[str] = Field(
        default=None, description="PEM public key for RSA/EC token verification"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_ttl_minutes: int = Field(
        default=60, description="Access token time-to-live in minutes"
    )
    jwt_issuer: Optional[str] = Field(
        default=None, description="Optional 'iss' claim stamped on and required of tokens"
    )

    # Token revocation configuration
    revocation_backend: str = Field(
        default="memory", description="Revocation registry backend: memory or redis"
    )
    revocation_key_prefix: str = Field(
        default="revoked_token:", description="Redis key prefix for revoked token ids"
    )
    revocation_sweep_interval_seconds: int = Field(
        default=300,
        description="Interval between sweeps of expired revocations (0 disables)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is acceptable."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """Validate the JWT algorithm is one we can sign and verify."""
        v_upper = v.upper()
        valid_algorithms = SYMMETRIC_JWT_ALGORITHMS + ASYMMETRIC_JWT_ALGORITHMS
        if v_upper not in valid_algorithms:
            raise ValueError(f"JWT algorithm must be one of {valid_algorithms}")
        return v_upper

    @field_validator("jwt_ttl_minutes")
    @classmethod
    def validate_jwt_ttl(cls, v: int) -> int:
        """Validate token TTL is positive."""
        if v <= 0:
            raise ValueError("JWT TTL must be a positive number of minutes")
        return v

    @field_validator("revocation_backend")
    @classmethod
    def validate_revocation_backend(cls, v: str) -> str:
        """Validate revocation backend name."""
        v_lower = v.lower()
        if v_lower not in ["memory", "redis"]:
            raise ValueError("Revocation backend must be 'memory' or 'redis'")
        return v_lower

    @field_validator("revocation_sweep_interval_seconds")
    @classmethod
    def validate_sweep_interval(cls, v: int) -> int:
        """Validate sweep interval is not negative."""
        if v < 0:
            raise ValueError("Sweep interval cannot be negative")
        return v

    @model_validator(mode="after")
    def validate_signing_keys(self) -> "ApplicationSettings":
        """Asymmetric algorithms need both halves of the key pair."""
        if self.jwt_algorithm in ASYMMETRIC_JWT_ALGORITHMS:
            if not self.jwt_private_key or not self.jwt_public_key:
                raise ValueError(
                    f"JWT algorithm {self.jwt_algorithm} requires "
                    "jwt_private_key and jwt_public_key"
                )
        elif not self.jwt_secret_key:
            raise ValueError("jwt_secret_key cannot be empty")
        return self

    @property
    def jwt_signing_key(self) -> str:
        """Key used to sign tokens."""
        if self.jwt_algorithm in ASYMMETRIC_JWT_ALGORITHMS:
            return self.jwt_private_key
        return self.jwt_secret_key

    @property
    def jwt_verification_key(self) -> str:
        """Key used to verify token signatures."""
        if self.jwt_algorithm in ASYMMETRIC_JWT_ALGORITHMS:
            return self.jwt_public_key
        return self.jwt_secret_key

    @property
    def jwt_ttl_seconds(self) -> int:
        """Access token TTL in seconds."""
        return self.jwt_ttl_minutes * 60

    @property
    def database_url(self) -> str:
        """Construct async PostgreSQL database URL."""
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def redis_url(self) -> str:
        """Construct Redis URL."""
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


# Global settings instance
settings = ApplicationSettings()
