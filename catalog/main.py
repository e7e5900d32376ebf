from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
import logging

from catalog.config import get_settings
from catalog.database import engine, Base
from catalog.api import products, health
from catalog.exceptions import (
    ProductNotFoundError,
    ProductValidationError,
    database_error_handler,
    product_not_found_handler,
    product_validation_handler,
    request_validation_handler
)

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up application...")

    # Create database tables
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")

    yield

    # Shutdown
    logger.info("Shutting down application...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    REST API for managing a product catalog.

    - **Listing**: paginated, newest first (`limit` is capped at 100)
    - **Search**: by name, price range and stock availability
    - **Create / Update / Delete**: full (PUT) and partial (PATCH) updates

    ## Errors
    - `400` with `{"errors": {"field": "message"}}` when validation fails
    - `404` with `{"error": "Product with ID {id} was not found."}` for unknown IDs
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# Register exception handlers
app.add_exception_handler(ProductNotFoundError, product_not_found_handler)
app.add_exception_handler(ProductValidationError, product_validation_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(SQLAlchemyError, database_error_handler)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(health.router, prefix=settings.API_PREFIX)
app.include_router(products.router, prefix=settings.API_PREFIX)


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": f"{settings.API_PREFIX}/health"
    }
