"""
MongoDB access layer for the catalog.
Handles connection, indexing, and the reads and writes the resolvers need.
"""

from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import ConnectionFailure
import structlog

from .models import AuthorRecord, BookRecord, UserRecord

logger = structlog.get_logger(__name__)


class CatalogDatabase:
    """
    Async MongoDB access for authors, books and users.
    Each method is one store round trip; nothing is cached in process.
    """

    def __init__(self, connection_url: str, database_name: str):
        """
        Initialize the catalog database.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
        """
        self.connection_url = connection_url
        self.database_name = database_name
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None

    @property
    def authors(self):
        return self.database.authors

    @property
    def books(self):
        return self.database.books

    @property
    def users(self):
        return self.database.users

    async def connect(self) -> None:
        """Establish connection to MongoDB and ensure indexes."""
        try:
            self.client = AsyncIOMotorClient(self.connection_url)
            self.database = self.client[self.database_name]

            # Test connection
            await self.client.admin.command('ping')
            logger.info("Successfully connected to MongoDB", database=self.database_name)

            await self._create_indexes()

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            raise

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    async def _create_indexes(self) -> None:
        """
        Create the indexes that back entity uniqueness and the common lookups.
        """
        try:
            # Author identity is by name
            await self.authors.create_index("name", unique=True)

            await self.books.create_index("title", unique=True)
            # Per-author counts group on this field
            await self.books.create_index("author")
            await self.books.create_index("genres")

            await self.users.create_index("username", unique=True)

            logger.info("Successfully created MongoDB indexes")

        except Exception as e:
            logger.error("Failed to create indexes", error=str(e))
            raise

    # Counts

    async def count_books(self) -> int:
        """Get total number of books."""
        return await self.books.count_documents({})

    async def count_authors(self) -> int:
        """Get total number of authors."""
        return await self.authors.count_documents({})

    async def count_books_by_author(self, author_ids: List[str]) -> Dict[str, int]:
        """
        Count books for many authors with a single aggregation.

        Args:
            author_ids: Author ObjectIds as strings

        Returns:
            Mapping of author id to book count; authors without books are absent
        """
        object_ids = [ObjectId(author_id) for author_id in author_ids]
        pipeline = [
            {"$match": {"author": {"$in": object_ids}}},
            {"$group": {"_id": "$author", "count": {"$sum": 1}}},
        ]
        cursor = self.books.aggregate(pipeline)
        groups = await cursor.to_list(length=None)
        logger.debug("Counted books by author", authors=len(object_ids), groups=len(groups))
        return {str(group["_id"]): group["count"] for group in groups}

    # Authors

    async def list_authors(self) -> List[AuthorRecord]:
        """Get every author document."""
        cursor = self.authors.find({})
        return [AuthorRecord.from_document(doc) async for doc in cursor]

    async def get_author_by_name(self, name: str) -> Optional[AuthorRecord]:
        """Get an author by exact name."""
        document = await self.authors.find_one({"name": name})
        if document:
            return AuthorRecord.from_document(document)
        return None

    async def ensure_author(self, author: AuthorRecord) -> Tuple[AuthorRecord, bool]:
        """
        Get the author with this name, inserting it if absent.

        The upsert is keyed by name, so concurrent or retried calls for the
        same new name leave exactly one author document.

        Returns:
            The stored author and whether this call created it
        """
        document = await self.authors.find_one_and_update(
            {"name": author.name},
            {"$setOnInsert": author.to_document()},
            upsert=True,
            return_document=ReturnDocument.BEFORE,
        )
        if document is not None:
            return AuthorRecord.from_document(document), False

        document = await self.authors.find_one({"name": author.name})
        logger.info("Created author", name=author.name, author_id=str(document["_id"]))
        return AuthorRecord.from_document(document), True

    async def set_author_born(self, author_id: str, born: int) -> Optional[AuthorRecord]:
        """
        Set an author's birth year.

        Returns:
            The updated author, or None if it no longer exists
        """
        document = await self.authors.find_one_and_update(
            {"_id": ObjectId(author_id)},
            {"$set": {"born": born}},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            logger.warning("Author not found for update", author_id=author_id)
            return None
        logger.debug("Updated author birth year", author_id=author_id, born=born)
        return AuthorRecord.from_document(document)

    # Books

    async def list_books_with_authors(self) -> List[Tuple[BookRecord, AuthorRecord]]:
        """
        Get every book together with its author in one aggregation.

        Returns:
            (book, author) pairs in natural collection order
        """
        pipeline = [
            {
                "$lookup": {
                    "from": "authors",
                    "localField": "author",
                    "foreignField": "_id",
                    "as": "author_doc",
                }
            },
            {"$unwind": "$author_doc"},
        ]
        cursor = self.books.aggregate(pipeline)
        results = []
        async for document in cursor:
            author_doc = document.pop("author_doc")
            results.append(
                (BookRecord.from_document(document), AuthorRecord.from_document(author_doc))
            )
        return results

    async def insert_book(self, book: BookRecord) -> BookRecord:
        """
        Insert a book.

        Raises:
            pymongo.errors.DuplicateKeyError: If the title already exists
        """
        try:
            result = await self.books.insert_one(book.to_document())
        except Exception as e:
            logger.error("Failed to insert book", title=book.title, error=str(e))
            raise

        logger.info("Inserted book", title=book.title, book_id=str(result.inserted_id))
        return book.model_copy(update={"id": str(result.inserted_id)})

    # Users

    async def insert_user(self, user: UserRecord) -> UserRecord:
        """
        Insert a user.

        Raises:
            pymongo.errors.DuplicateKeyError: If the username already exists
        """
        try:
            result = await self.users.insert_one(user.to_document())
        except Exception as e:
            logger.error("Failed to insert user", username=user.username, error=str(e))
            raise

        logger.info("Created user", username=user.username, user_id=str(result.inserted_id))
        return user.model_copy(update={"id": str(result.inserted_id)})

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        """Get a user by username."""
        document = await self.users.find_one({"username": username})
        if document:
            return UserRecord.from_document(document)
        return None

    async def get_user_by_id(self, user_id: str) -> Optional[UserRecord]:
        """
        Get a user by ObjectId string.

        Returns None for ids that are not valid ObjectIds.
        """
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None

        document = await self.users.find_one({"_id": object_id})
        if document:
            return UserRecord.from_document(document)
        return None

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            await self.database.command("ping")

            return {
                "status": "healthy",
                "authors_count": await self.count_authors(),
                "books_count": await self.count_books(),
                "users_count": await self.users.count_documents({}),
            }
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }
