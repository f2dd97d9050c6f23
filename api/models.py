"""
Response models for the HTTP endpoints that sit beside the GraphQL route.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
    authors_count: Optional[int] = Field(None, description="Stored authors")
    books_count: Optional[int] = Field(None, description="Stored books")
    users_count: Optional[int] = Field(None, description="Registered users")
