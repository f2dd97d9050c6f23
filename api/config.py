"""
API configuration settings.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration settings.

    ``JWT_SECRET`` has no default: a missing value fails at startup.
    """

    # API Settings
    api_title: str = "Library Catalog API"
    api_version: str = "1.0.0"
    api_description: str = """
    GraphQL API for a catalog of books and authors.

    ## Operations

    * **Queries**: `bookCount`, `authorCount`, `allBooks(author, genre)`, `allAuthors`, `me`
    * **Mutations**: `addBook`, `editAuthor`, `createUser`, `login`

    ## Authentication

    `addBook` and `editAuthor` require a token from `login`:

    ```
    Authorization: Bearer <token>
    ```
    """

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 4000
    debug: bool = False

    # Token Settings
    jwt_secret: str = Field(..., description="Signing secret for bearer tokens")
    jwt_algorithm: str = "HS256"
    token_expire_minutes: int = 60

    # Every user logs in with this one password. Placeholder until
    # per-user credentials are stored.
    shared_login_secret: str = "secret"

    # CORS Settings
    cors_origins: List[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]

    @field_validator('jwt_secret')
    @classmethod
    def validate_jwt_secret(cls, v):
        """Reject an empty signing secret."""
        if not v.strip():
            raise ValueError('jwt_secret must not be empty')
        return v

    @field_validator('token_expire_minutes')
    @classmethod
    def validate_token_expiry(cls, v):
        """Ensure tokens expire."""
        if v < 1:
            raise ValueError('token_expire_minutes must be at least 1')
        return v

    model_config = {
        "env_file": ".env",
        "extra": "ignore"  # Ignore extra fields from .env
    }


# Global config instance
config = APIConfig()
