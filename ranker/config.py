"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables or .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, ValidationError
from pathlib import Path
import logging
import sys

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Token Configuration
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 10080  # 7 days

    # Accounts
    allow_registration: bool = True
    bcrypt_rounds: int = 12

    # Application Configuration
    data_dir: Path = Path("./data")
    log_level: str = "INFO"  # Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL

    # Server Configuration
    server_host: str = "0.0.0.0"
    server_port: int = 3000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator('jwt_secret')
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Validate the signing secret is not empty and has minimum length."""
        if not v or len(v.strip()) == 0:
            raise ValueError("JWT_SECRET cannot be empty")
        if len(v) < 32:
            raise ValueError(
                "JWT_SECRET must be at least 32 characters for security. "
                "Generate one with: python -c \"import secrets; print(secrets.token_hex(32))\""
            )
        return v

    @field_validator('jwt_expires_minutes')
    @classmethod
    def validate_jwt_expires_minutes(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("JWT_EXPIRES_MINUTES must be positive")
        return v

    @field_validator('bcrypt_rounds')
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """bcrypt only accepts cost factors between 4 and 31."""
        if not 4 <= v <= 31:
            raise ValueError(f"BCRYPT_ROUNDS must be between 4 and 31. Got: {v}")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of: {', '.join(valid_levels)}. Got: {v}"
            )
        return v_upper

    def get_db_path(self) -> Path:
        """Get the full path to the SQLite database file."""
        return self.data_dir / "ranker.db"


def load_settings() -> Settings:
    """
    Load and validate settings with helpful error messages.

    Returns:
        Settings instance

    Exits:
        System exit with code 1 if validation fails
    """
    try:
        return Settings()
    except ValidationError as e:
        logger.error("=" * 60)
        logger.error("CONFIGURATION ERROR - Missing or invalid environment variables")
        logger.error("=" * 60)

        for error in e.errors():
            field = error['loc'][0] if error['loc'] else 'unknown'
            msg = error['msg']

            # Convert field name to env var format
            env_var = str(field).upper()

            logger.error(f"{env_var}: {msg}")

        logger.error("")
        logger.error("Required environment variables:")
        logger.error("  - JWT_SECRET: Token signing key (min 32 characters)")
        logger.error("")
        logger.error("Optional environment variables:")
        logger.error("  - JWT_ALGORITHM: Token signing algorithm (default: HS256)")
        logger.error("  - JWT_EXPIRES_MINUTES: Token lifetime in minutes (default: 10080)")
        logger.error("  - ALLOW_REGISTRATION: Allow new accounts via /api/users/add (default: true)")
        logger.error("  - BCRYPT_ROUNDS: Password hashing cost, 4-31 (default: 12)")
        logger.error("  - LOG_LEVEL: Logging level - DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)")
        logger.error("  - SERVER_HOST: Bind address (default: 0.0.0.0)")
        logger.error("  - SERVER_PORT: Server port (default: 3000)")
        logger.error("  - DATA_DIR: Data directory path (default: ./data)")
        logger.error("")
        logger.error("Create a .env file or set these environment variables.")
        logger.error("=" * 60)

        sys.exit(1)


# Global settings instance
settings = load_settings()
