"""
Resolver functions for catalog queries and mutations.

Resolvers read ``db``, ``current_user`` and ``loaders`` from the request
context built in ``api.schema``.
"""

from typing import List, Optional

import strawberry
import structlog
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from api import errors
from api.auth import check_shared_secret, token_service
from api.types import Author, Book, Token, User
from catalog.database import CatalogDatabase
from catalog.models import AuthorRecord, BookRecord, UserRecord

logger = structlog.get_logger(__name__)


def _db(info: strawberry.Info) -> CatalogDatabase:
    return info.context["db"]


def _require_user(info: strawberry.Info) -> UserRecord:
    current_user = info.context.get("current_user")
    if current_user is None:
        raise errors.not_authenticated()
    return current_user


# Query resolvers

async def resolve_book_count(info: strawberry.Info) -> int:
    return await _db(info).count_books()


async def resolve_author_count(info: strawberry.Info) -> int:
    return await _db(info).count_authors()


async def resolve_all_books(
    info: strawberry.Info,
    author: Optional[str] = None,
    genre: Optional[str] = None,
) -> List[Book]:
    """
    All books with authors resolved, optionally filtered.

    With both filters the genre filter is applied first, then the author
    filter on what remains.
    """
    pairs = await _db(info).list_books_with_authors()

    if genre is not None:
        pairs = [(book, owner) for book, owner in pairs if genre in book.genres]
    if author is not None:
        pairs = [(book, owner) for book, owner in pairs if owner.name == author]

    return [Book.from_records(book, owner) for book, owner in pairs]


async def resolve_all_authors(info: strawberry.Info) -> List[Author]:
    authors = await _db(info).list_authors()
    return [Author.from_record(record) for record in authors]


def resolve_me(info: strawberry.Info) -> Optional[User]:
    current_user = info.context.get("current_user")
    if current_user is None:
        return None
    return User.from_record(current_user)


# Mutation resolvers

async def add_book(
    info: strawberry.Info,
    title: str,
    author: str,
    published: int,
    genres: List[str],
) -> Book:
    """
    Add a book, creating its author first if the name is new.

    If the book cannot be saved after a new author was created, the author
    stays with no books; there is no transaction around the two writes.
    """
    user = _require_user(info)
    db = _db(info)

    try:
        owner, created = await db.ensure_author(AuthorRecord(name=author))
        book = await db.insert_book(
            BookRecord(title=title, published=published, author_id=owner.id, genres=genres)
        )
    except (ValidationError, PyMongoError) as e:
        logger.warning("Saving book failed", title=title, author=author, error=str(e))
        raise errors.save_failed("Saving book failed", title, e)

    # Counts loaded earlier in this request are stale now
    info.context["loaders"].book_count_loader.clear_all()
    logger.info(
        "Book added",
        title=title,
        author=owner.name,
        author_created=created,
        username=user.username,
    )
    return Book.from_records(book, owner)


async def edit_author(info: strawberry.Info, name: str, set_born_to: int) -> Optional[Author]:
    """Set an author's birth year. Returns None for an unknown author."""
    _require_user(info)
    db = _db(info)

    author = await db.get_author_by_name(name)
    if author is None:
        return None

    try:
        updated = await db.set_author_born(author.id, set_born_to)
    except PyMongoError as e:
        logger.warning("Changing born date failed", name=name, born=set_born_to, error=str(e))
        raise errors.save_failed("Changing born date failed", set_born_to, e)

    if updated is None:
        return None
    return Author.from_record(updated)


async def create_user(info: strawberry.Info, username: str, favorite_genre: str) -> User:
    try:
        user = await _db(info).insert_user(
            UserRecord(username=username, favorite_genre=favorite_genre)
        )
    except (ValidationError, PyMongoError) as e:
        logger.warning("Creating the user failed", username=username, error=str(e))
        raise errors.save_failed("Creating the user failed", username, e)

    return User.from_record(user)


async def login(info: strawberry.Info, username: str, password: str) -> Token:
    """
    Exchange a username and the shared secret for a token.

    Unknown users and wrong passwords fail with the same error.
    """
    user = await _db(info).get_user_by_username(username)

    if user is None or not check_shared_secret(password):
        logger.info("Login rejected", username=username)
        raise errors.wrong_credentials()

    return Token(value=token_service.issue_token(user))
