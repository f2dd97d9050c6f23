"""
FastAPI main application for the Library Catalog API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import config as api_config
from api.models import ErrorResponse, HealthResponse
from api.schema import create_graphql_router, validate_schema
from catalog.database import CatalogDatabase
from utilities.config import config
from utilities.logger import get_logger, setup_logging

logger = get_logger(__name__)

# Global database service
db_service: Optional[CatalogDatabase] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug or api_config.debug
    )
    logger.info("Starting Library Catalog API", port=api_config.port)
    logger.warning(
        "Login uses one shared secret for every user; replace before production use"
    )

    validate_schema()

    global db_service
    logger.info("Connecting to MongoDB", uri=config.redacted_uri())
    database = CatalogDatabase(config.mongodb_uri, config.mongodb_database)
    try:
        await database.connect()
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        raise
    db_service = database

    yield

    logger.info("Shutting down Library Catalog API")
    db_service = None
    await database.disconnect()


def get_database() -> Optional[CatalogDatabase]:
    return db_service


app = FastAPI(
    title=api_config.api_title,
    description=api_config.api_description,
    version=api_config.api_version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.cors_origins,
    allow_credentials=api_config.cors_allow_credentials,
    allow_methods=api_config.cors_allow_methods,
    allow_headers=api_config.cors_allow_headers,
)

app.include_router(create_graphql_router(get_database, graphiql=api_config.debug))


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.detail,
            status_code=exc.status_code
        ).model_dump(),
        headers=exc.headers
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal server error",
            detail=str(exc) if api_config.debug else None,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        ).model_dump()
    )


# Health check endpoint (no authentication required)
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    health_info = {"status": "unavailable"}
    if db_service:
        health_info = await db_service.health_check()
    db_status = health_info.get("status", "unknown")

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=api_config.api_version,
        database_status=db_status,
        authors_count=health_info.get("authors_count"),
        books_count=health_info.get("books_count"),
        users_count=health_info.get("users_count"),
    )
