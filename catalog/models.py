"""
Pydantic models for catalog entities.
Validates Author, Book and User records before they are written to MongoDB
and converts stored documents back into records.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from pydantic import BaseModel, Field, field_validator


def _document_id(document: Dict[str, Any]) -> Dict[str, Any]:
    """Copy a MongoDB document, replacing ``_id`` with a string ``id``."""
    data = dict(document)
    if "_id" in data:
        data["id"] = str(data.pop("_id"))
    return data


class AuthorRecord(BaseModel):
    """
    Author entity. ``name`` is the identifying key; ``bookCount`` is derived
    and never stored.
    """
    id: Optional[str] = Field(None, description="MongoDB ObjectId as string")
    name: str = Field(..., min_length=1, description="Unique author name")
    born: Optional[int] = Field(None, description="Birth year")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Reject names made only of whitespace."""
        if not v.strip():
            raise ValueError('Author name cannot be blank')
        return v

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "AuthorRecord":
        return cls(**_document_id(document))

    def to_document(self) -> Dict[str, Any]:
        return {"name": self.name, "born": self.born}


class BookRecord(BaseModel):
    """
    Book entity. ``author_id`` references an Author document by ObjectId;
    ``genres`` keeps the order it was given in.
    """
    id: Optional[str] = Field(None, description="MongoDB ObjectId as string")
    title: str = Field(..., min_length=1, description="Book title")
    published: int = Field(..., description="Publication year")
    author_id: str = Field(..., description="ObjectId of the author document")
    genres: List[str] = Field(default_factory=list, description="Genre labels")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        """Reject titles made only of whitespace."""
        if not v.strip():
            raise ValueError('Book title cannot be blank')
        return v

    @field_validator('author_id')
    @classmethod
    def validate_author_id(cls, v):
        """Ensure the author reference is a valid ObjectId."""
        if not ObjectId.is_valid(v):
            raise ValueError('author_id must be a valid ObjectId')
        return v

    @field_validator('genres')
    @classmethod
    def validate_genres(cls, v):
        """Ensure every genre label is non-empty."""
        if any(not genre.strip() for genre in v):
            raise ValueError('Genre labels cannot be blank')
        return v

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "BookRecord":
        data = _document_id(document)
        data["author_id"] = str(data.pop("author"))
        return cls(**data)

    def to_document(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "published": self.published,
            "author": ObjectId(self.author_id),
            "genres": list(self.genres),
        }


class UserRecord(BaseModel):
    """
    User entity. No password is stored; see ``APIConfig.shared_login_secret``.
    """
    id: Optional[str] = Field(None, description="MongoDB ObjectId as string")
    username: str = Field(..., min_length=3, description="Unique username")
    favorite_genre: str = Field(..., min_length=1, description="Favorite genre")

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        """Usernames may not contain whitespace."""
        if any(ch.isspace() for ch in v):
            raise ValueError('Username cannot contain whitespace')
        return v

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "UserRecord":
        data = _document_id(document)
        data["favorite_genre"] = data.pop("favoriteGenre")
        return cls(**data)

    def to_document(self) -> Dict[str, Any]:
        return {"username": self.username, "favoriteGenre": self.favorite_genre}
