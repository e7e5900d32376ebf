import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ProductNotFoundError(Exception):
    """Exception raised when the requested product doesn't exist."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} was not found.")


class ProductValidationError(Exception):
    """Exception raised when product input fails validation. Carries a field -> message map."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("Validation failed.")


async def product_not_found_handler(_request: Request, exc: ProductNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": str(exc)}
    )


async def product_validation_handler(_request: Request, exc: ProductValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": exc.errors}
    )


async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies and query parameters in the same shape as ProductValidationError."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("request",)
        field = str(loc[-1])
        errors.setdefault(field, error.get("msg", "Invalid value"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": errors}
    )


async def database_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Store failures are not part of the business taxonomy; report them as 500."""
    logger.error(f"Database error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )
