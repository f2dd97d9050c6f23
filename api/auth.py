"""
Bearer token issuing and verification, and per-request user resolution.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
import structlog
from fastapi import HTTPException, Request, status
from jwt.exceptions import InvalidTokenError

from api.config import APIConfig, config
from catalog.database import CatalogDatabase
from catalog.models import UserRecord

logger = structlog.get_logger(__name__)

BEARER_PREFIX = "Bearer "


class AuthenticationError(Exception):
    """Raised when a bearer token cannot be verified."""


class TokenService:
    """Issues and verifies signed tokens carrying a user identity claim."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_config(cls, api_config: APIConfig) -> "TokenService":
        return cls(
            secret_key=api_config.jwt_secret,
            algorithm=api_config.jwt_algorithm,
            expire_minutes=api_config.token_expire_minutes,
        )

    def issue_token(self, user: UserRecord) -> str:
        """
        Issue a token for a user.

        Args:
            user: Stored user (must have an id)

        Returns:
            Encoded token with ``username`` and ``id`` claims
        """
        now = datetime.now(timezone.utc)
        payload = {
            "username": user.username,
            "id": user.id,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify a token and return its claims.

        Raises:
            AuthenticationError: If the signature, expiry or claims are invalid
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "id"]},
            )
        except InvalidTokenError as e:
            logger.warning("Token validation failed", error=str(e))
            raise AuthenticationError("Invalid token") from e

        if not isinstance(payload.get("id"), str):
            raise AuthenticationError("Invalid token")

        return payload


def check_shared_secret(password: str, api_config: APIConfig = config) -> bool:
    """
    Compare a login password with the shared secret every user logs in with.

    This is a placeholder credential check, not per-user authentication.
    """
    return secrets.compare_digest(
        password.encode("utf-8"), api_config.shared_login_secret.encode("utf-8")
    )


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization`` header, or None for other schemes."""
    if authorization and authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):]
    return None


async def resolve_current_user(
    request: Request,
    db: CatalogDatabase,
    tokens: TokenService,
) -> Optional[UserRecord]:
    """
    Resolve the authenticated user for a request.

    A missing header yields an anonymous request. A present but invalid
    bearer token fails the whole request.

    Raises:
        HTTPException: 401 if the bearer token does not verify
    """
    token = extract_bearer_token(request.headers.get("authorization"))
    if token is None:
        return None

    try:
        claims = tokens.verify_token(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await db.get_user_by_id(claims["id"])
    if user is None:
        logger.info("Token refers to unknown user", user_id=claims["id"])
    return user


token_service = TokenService.from_config(config)
