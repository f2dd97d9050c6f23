"""
GraphQL schema definition using Strawberry
"""

from typing import Any, Callable, Dict, List, Optional

import strawberry
import structlog
from fastapi import HTTPException, Request, status
from graphql import get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter

from api import resolvers
from api.auth import TokenService, resolve_current_user, token_service
from api.loaders import Loaders
from api.types import Author, Book, Token, User
from catalog.database import CatalogDatabase

logger = structlog.get_logger(__name__)


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def book_count(self, info: strawberry.Info) -> int:
        """Total number of books."""
        return await resolvers.resolve_book_count(info)

    @strawberry.field
    async def author_count(self, info: strawberry.Info) -> int:
        """Total number of authors."""
        return await resolvers.resolve_author_count(info)

    @strawberry.field
    async def all_books(
        self,
        info: strawberry.Info,
        author: Optional[str] = None,
        genre: Optional[str] = None,
    ) -> List[Book]:
        """Books, optionally filtered by author name and genre."""
        return await resolvers.resolve_all_books(info, author, genre)

    @strawberry.field
    async def all_authors(self, info: strawberry.Info) -> List[Author]:
        """All authors."""
        return await resolvers.resolve_all_authors(info)

    @strawberry.field
    def me(self, info: strawberry.Info) -> Optional[User]:
        """The authenticated user, if any."""
        return resolvers.resolve_me(info)


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    @strawberry.mutation
    async def add_book(
        self,
        info: strawberry.Info,
        title: str,
        author: str,
        published: int,
        genres: List[str],
    ) -> Optional[Book]:
        """Add a book, creating the author on first use."""
        return await resolvers.add_book(info, title, author, published, genres)

    @strawberry.mutation
    async def edit_author(
        self, info: strawberry.Info, name: str, set_born_to: int
    ) -> Optional[Author]:
        """Set an author's birth year."""
        return await resolvers.edit_author(info, name, set_born_to)

    @strawberry.mutation
    async def create_user(
        self, info: strawberry.Info, username: str, favorite_genre: str
    ) -> Optional[User]:
        """Register a user."""
        return await resolvers.create_user(info, username, favorite_genre)

    @strawberry.mutation
    async def login(self, info: strawberry.Info, username: str, password: str) -> Optional[Token]:
        """Log in and receive a bearer token."""
        return await resolvers.login(info, username, password)


schema = strawberry.Schema(query=Query, mutation=Mutation)


def validate_schema() -> None:
    """Validate the GraphQL schema at startup.

    Raises:
        Exception: If the schema is invalid or introspection fails
    """
    try:
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise Exception(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        result = graphql_sync(graphql_schema, get_introspection_query())
        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise Exception(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


async def build_context(
    request: Request,
    db: CatalogDatabase,
    tokens: TokenService = token_service,
) -> Dict[str, Any]:
    """Build the per-request resolver context."""
    current_user = await resolve_current_user(request, db, tokens)
    return {
        "db": db,
        "current_user": current_user,
        "loaders": Loaders(db),
    }


def create_graphql_router(
    get_database: Callable[[], Optional[CatalogDatabase]],
    graphiql: bool = False,
) -> GraphQLRouter:
    """Create a GraphQL router for FastAPI.

    Args:
        get_database: Returns the connected database at request time
        graphiql: Serve the GraphiQL IDE on GET
    """

    async def get_context(request: Request) -> Dict[str, Any]:
        db = get_database()
        if db is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Database service not available"
            )
        return await build_context(request, db)

    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql" if graphiql else None,
        context_getter=get_context,
    )
