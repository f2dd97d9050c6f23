"""
Unit tests for catalog entity records.
Tests validation and conversion to and from MongoDB documents.
"""

import pytest
from bson import ObjectId
from pydantic import ValidationError

from catalog.models import AuthorRecord, BookRecord, UserRecord


class TestAuthorRecord:
    """Test cases for AuthorRecord."""

    def test_born_is_optional(self):
        author = AuthorRecord(name="Sandi Metz")

        assert author.born is None
        assert author.id is None
        assert author.to_document() == {"name": "Sandi Metz", "born": None}

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            AuthorRecord(name="   ")

        assert "Author name cannot be blank" in str(exc_info.value)

    def test_from_document(self):
        object_id = ObjectId()
        author = AuthorRecord.from_document(
            {"_id": object_id, "name": "Martin Fowler", "born": 1963}
        )

        assert author.id == str(object_id)
        assert author.name == "Martin Fowler"
        assert author.born == 1963


class TestBookRecord:
    """Test cases for BookRecord."""

    def test_genre_order_preserved(self):
        author_id = str(ObjectId())
        book = BookRecord(
            title="Agile software development",
            published=2002,
            author_id=author_id,
            genres=["agile", "patterns", "design"],
        )

        document = book.to_document()
        assert document["genres"] == ["agile", "patterns", "design"]
        assert document["author"] == ObjectId(author_id)
        assert "_id" not in document

    def test_short_title_allowed(self):
        book = BookRecord(title="Dune", published=1965, author_id=str(ObjectId()))

        assert book.title == "Dune"
        assert book.genres == []

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            BookRecord(title="", published=1965, author_id=str(ObjectId()))

    def test_invalid_author_reference_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            BookRecord(title="Clean Code", published=2008, author_id="Robert Martin")

        assert "author_id must be a valid ObjectId" in str(exc_info.value)

    def test_blank_genre_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            BookRecord(
                title="Clean Code",
                published=2008,
                author_id=str(ObjectId()),
                genres=["refactoring", " "],
            )

        assert "Genre labels cannot be blank" in str(exc_info.value)

    def test_non_integer_year_rejected(self):
        with pytest.raises(ValidationError):
            BookRecord(title="Clean Code", published="soon", author_id=str(ObjectId()))

    def test_from_document(self):
        book_id, author_id = ObjectId(), ObjectId()
        book = BookRecord.from_document({
            "_id": book_id,
            "title": "Crime and punishment",
            "published": 1866,
            "author": author_id,
            "genres": ["classic", "crime"],
        })

        assert book.id == str(book_id)
        assert book.author_id == str(author_id)
        assert book.genres == ["classic", "crime"]


class TestUserRecord:
    """Test cases for UserRecord."""

    def test_document_uses_camel_case_genre(self):
        user = UserRecord(username="alice", favorite_genre="sci-fi")

        assert user.to_document() == {"username": "alice", "favoriteGenre": "sci-fi"}

    def test_round_trip_from_document(self):
        object_id = ObjectId()
        user = UserRecord.from_document(
            {"_id": object_id, "username": "alice", "favoriteGenre": "sci-fi"}
        )

        assert user.id == str(object_id)
        assert user.favorite_genre == "sci-fi"

    def test_short_username_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            UserRecord(username="al", favorite_genre="sci-fi")

        assert "at least 3 characters" in str(exc_info.value)

    def test_username_with_whitespace_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            UserRecord(username="alice smith", favorite_genre="sci-fi")

        assert "Username cannot contain whitespace" in str(exc_info.value)
