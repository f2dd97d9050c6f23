"""
GraphQL type definitions
"""

from typing import List, Optional

import strawberry

from catalog.models import AuthorRecord, BookRecord, UserRecord


@strawberry.type
class Author:
    """Author type for GraphQL API."""

    name: str
    born: Optional[int]
    id: strawberry.ID

    @strawberry.field
    async def book_count(self, info: strawberry.Info) -> int:
        """Number of books referencing this author."""
        return await info.context["loaders"].book_count_loader.load(str(self.id))

    @classmethod
    def from_record(cls, record: AuthorRecord) -> "Author":
        return cls(name=record.name, born=record.born, id=strawberry.ID(record.id))


@strawberry.type
class Book:
    """Book type for GraphQL API."""

    title: str
    published: int
    author: Author
    id: strawberry.ID
    genres: List[str]

    @classmethod
    def from_records(cls, book: BookRecord, author: AuthorRecord) -> "Book":
        return cls(
            title=book.title,
            published=book.published,
            author=Author.from_record(author),
            id=strawberry.ID(book.id),
            genres=list(book.genres),
        )


@strawberry.type
class User:
    """User type for GraphQL API."""

    username: str
    favorite_genre: str
    id: strawberry.ID

    @classmethod
    def from_record(cls, record: UserRecord) -> "User":
        return cls(
            username=record.username,
            favorite_genre=record.favorite_genre,
            id=strawberry.ID(record.id),
        )


@strawberry.type
class Token:
    """Signed bearer token returned by login."""

    value: str
