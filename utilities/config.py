"""
Configuration management using environment variables.
Handles document store and logging settings with validation and defaults.
"""

from typing import Optional
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class StoreConfig(BaseSettings):
    """
    Configuration class for the document store and logging.
    Uses pydantic BaseSettings for environment variable management.

    ``MONGODB_URI`` has no default: a missing value fails at startup.
    """

    # MongoDB Configuration
    mongodb_uri: str = Field(..., description="MongoDB connection string")
    mongodb_database: str = Field(default="library")

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: Optional[str] = Field(default=None)

    # Development/Testing
    debug: bool = Field(default=False)

    @field_validator('mongodb_uri')
    @classmethod
    def validate_mongodb_uri(cls, v):
        """Ensure the connection string looks like a MongoDB URI."""
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError('mongodb_uri must start with mongodb:// or mongodb+srv://')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra fields from .env
    }

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None

    def redacted_uri(self) -> str:
        """Connection string with credentials stripped, safe for logs."""
        scheme, _, rest = self.mongodb_uri.partition("://")
        if "@" in rest:
            rest = rest.split("@", 1)[1]
        return f"{scheme}://{rest}"


# Global configuration instance
config = StoreConfig()
