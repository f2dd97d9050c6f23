"""
GraphQL API for the Library Catalog.

This module provides:
- Book and author catalog queries with genre and author filters
- Book, author and user registration mutations
- Bearer token login and per-request authentication
- Health checks for the service and its database
"""
