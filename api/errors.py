"""
Client-visible GraphQL errors.

Every error carries the same ``extensions`` shape:
``{"code": "BAD_USER_INPUT", "kind": <kind>}`` plus ``invalidArgs`` and
``error`` for failed saves.
"""

from typing import Any, Optional

from graphql import GraphQLError

BAD_USER_INPUT = "BAD_USER_INPUT"

UNAUTHENTICATED = "UNAUTHENTICATED"
BAD_CREDENTIALS = "BAD_CREDENTIALS"
SAVE_FAILED = "SAVE_FAILED"


def _error(message: str, kind: str, **extra: Any) -> GraphQLError:
    extensions = {"code": BAD_USER_INPUT, "kind": kind}
    extensions.update(extra)
    return GraphQLError(message, extensions=extensions)


def not_authenticated() -> GraphQLError:
    return _error("not authenticated", UNAUTHENTICATED)


def wrong_credentials() -> GraphQLError:
    return _error("wrong credentials", BAD_CREDENTIALS)


def save_failed(message: str, invalid_args: Any, error: Optional[Exception] = None) -> GraphQLError:
    """Persisting an entity was rejected by validation or by the store."""
    return _error(
        message,
        SAVE_FAILED,
        invalidArgs=invalid_args,
        error=str(error) if error is not None else None,
    )
