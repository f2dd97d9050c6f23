"""
Pytest configuration and shared fixtures.
"""

import os

# Required settings must exist before application modules are imported
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")

from typing import Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest
import strawberry
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from api.auth import TokenService
from api.loaders import Loaders
from catalog.database import CatalogDatabase
from catalog.models import AuthorRecord, BookRecord, UserRecord


class InMemoryCatalog:
    """
    Dict-backed stand-in for CatalogDatabase with the same async methods.
    Enforces the same uniqueness rules as the MongoDB indexes.
    """

    def __init__(self):
        self.authors: Dict[str, AuthorRecord] = {}
        self.books: Dict[str, BookRecord] = {}
        self.users: Dict[str, UserRecord] = {}
        self.count_calls: List[List[str]] = []

    async def count_books(self) -> int:
        return len(self.books)

    async def count_authors(self) -> int:
        return len(self.authors)

    async def count_books_by_author(self, author_ids: List[str]) -> Dict[str, int]:
        self.count_calls.append(list(author_ids))
        counts: Dict[str, int] = {}
        for book in self.books.values():
            if book.author_id in author_ids:
                counts[book.author_id] = counts.get(book.author_id, 0) + 1
        return counts

    async def list_authors(self) -> List[AuthorRecord]:
        return list(self.authors.values())

    async def get_author_by_name(self, name: str) -> Optional[AuthorRecord]:
        for author in self.authors.values():
            if author.name == name:
                return author
        return None

    async def ensure_author(self, author: AuthorRecord) -> Tuple[AuthorRecord, bool]:
        existing = await self.get_author_by_name(author.name)
        if existing is not None:
            return existing, False
        stored = author.model_copy(update={"id": str(ObjectId())})
        self.authors[stored.id] = stored
        return stored, True

    async def set_author_born(self, author_id: str, born: int) -> Optional[AuthorRecord]:
        if author_id not in self.authors:
            return None
        updated = self.authors[author_id].model_copy(update={"born": born})
        self.authors[author_id] = updated
        return updated

    async def list_books_with_authors(self) -> List[Tuple[BookRecord, AuthorRecord]]:
        return [(book, self.authors[book.author_id]) for book in self.books.values()]

    async def insert_book(self, book: BookRecord) -> BookRecord:
        if any(existing.title == book.title for existing in self.books.values()):
            raise DuplicateKeyError(f"duplicate key: title {book.title!r}", 11000)
        stored = book.model_copy(update={"id": str(ObjectId())})
        self.books[stored.id] = stored
        return stored

    async def insert_user(self, user: UserRecord) -> UserRecord:
        if await self.get_user_by_username(user.username) is not None:
            raise DuplicateKeyError(f"duplicate key: username {user.username!r}", 11000)
        stored = user.model_copy(update={"id": str(ObjectId())})
        self.users[stored.id] = stored
        return stored

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        for user in self.users.values():
            if user.username == username:
                return user
        return None

    async def get_user_by_id(self, user_id: str) -> Optional[UserRecord]:
        return self.users.get(user_id)

    async def health_check(self) -> Dict:
        return {
            "status": "healthy",
            "authors_count": len(self.authors),
            "books_count": len(self.books),
            "users_count": len(self.users),
        }


@pytest.fixture
def catalog():
    """Empty in-memory catalog."""
    return InMemoryCatalog()


@pytest.fixture
def mock_catalog_db():
    """Create a mock catalog database for resolver unit tests."""
    db = AsyncMock(spec=CatalogDatabase)
    db.count_books.return_value = 7
    db.count_authors.return_value = 5
    db.count_books_by_author.return_value = {}
    return db


@pytest.fixture
def token_service():
    """Token service with a test-only secret."""
    return TokenService(secret_key="test-secret-key-for-testing-only")


@pytest.fixture
def sample_user():
    """A stored user."""
    return UserRecord(id=str(ObjectId()), username="alice", favorite_genre="sci-fi")


@pytest.fixture
def sample_author():
    """A stored author."""
    return AuthorRecord(id=str(ObjectId()), name="Robert Martin", born=1952)


@pytest.fixture
def make_info():
    """Build a mock strawberry Info whose context wraps the given database."""

    def _make_info(db, current_user=None):
        info = MagicMock(spec=strawberry.Info)
        info.context = {
            "db": db,
            "current_user": current_user,
            "loaders": Loaders(db),
        }
        return info

    return _make_info


@pytest.fixture
def make_context():
    """Build a resolver context dict for executing the schema directly."""

    def _make_context(db, current_user=None):
        return {
            "db": db,
            "current_user": current_user,
            "loaders": Loaders(db),
        }

    return _make_context
