"""
Catalog storage for the Library Catalog API.

This package provides:
- Pydantic entity records for authors, books and users
- Async MongoDB access through motor
"""
