from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session
from decimal import Decimal
from typing import Optional

from catalog.config import get_settings
from catalog.database import get_db
from catalog.services.product_repository import ProductRepository
from catalog.services.product_service import ProductPage, ProductService, ProductServiceInterface
from catalog.services.product_validator import ProductValidator
from catalog.schemas.product import (
    PaginationMeta,
    ProductInput,
    ProductListResponse,
    ProductResponse,
    ProductSearchCriteria
)

settings = get_settings()

router = APIRouter(prefix="/products", tags=["Products"])


def get_product_service(db: Session = Depends(get_db)) -> ProductServiceInterface:
    """Dependency that builds the product service for one request."""
    return ProductService(ProductRepository(db), ProductValidator())


def _list_response(result: ProductPage) -> ProductListResponse:
    return ProductListResponse(
        data=[ProductResponse.model_validate(p) for p in result.items],
        meta=PaginationMeta(
            total=result.total,
            page=result.page,
            limit=result.limit,
            pages=result.page_count
        )
    )


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List all products",
    description="Get a paginated list of all products, newest first."
)
def list_products(
    page: int = Query(1, description="Page number (starts at 1)"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, description="Items per page (max 100)"),
    service: ProductServiceInterface = Depends(get_product_service)
):
    """
    Get paginated list of products.

    Out-of-range values are clamped: page to at least 1, limit to 1..100.
    """
    return _list_response(service.list_products(page, limit))


@router.get(
    "/search",
    response_model=ProductListResponse,
    summary="Search products",
    description="Search products by name, price range and stock availability."
)
def search_products(
    name: Optional[str] = Query(None, description="Search by product name (partial match)"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", description="Minimum price"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", description="Maximum price"),
    in_stock: Optional[bool] = Query(None, alias="inStock", description="Only products in stock"),
    page: int = Query(1, description="Page number (starts at 1)"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, description="Items per page (max 100)"),
    service: ProductServiceInterface = Depends(get_product_service)
):
    """Search products. All provided filters must match."""
    criteria = ProductSearchCriteria(
        name=name,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock
    )
    return _list_response(service.search_products(criteria, page, limit))


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID",
    description="Get detailed information about a specific product.",
    responses={404: {"description": "Product not found"}}
)
def get_product(
    product_id: int,
    service: ProductServiceInterface = Depends(get_product_service)
):
    """Get a product by ID."""
    return service.get_product(product_id)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a new product with name, description, price and quantity.",
    responses={400: {"description": "Validation failed"}}
)
def create_product(
    product_data: ProductInput,
    request: Request,
    response: Response,
    service: ProductServiceInterface = Depends(get_product_service)
):
    """
    Create a new product.

    - **name**: Product name (required, max 255 characters)
    - **description**: Optional, max 5000 characters
    - **price**: Must be positive and below 1,000,000 (required)
    - **quantity**: Must be non-negative and below 1,000,000 (required)
    """
    product = service.create_product(product_data)
    response.headers["Location"] = str(request.url_for("get_product", product_id=product.id))
    return product


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update a product (full)",
    description="Replace all product fields. The body is validated as for creation.",
    responses={400: {"description": "Validation failed"}, 404: {"description": "Product not found"}}
)
def update_product(
    product_id: int,
    product_data: ProductInput,
    service: ProductServiceInterface = Depends(get_product_service)
):
    """Full update: every field is overwritten, omitted description becomes null."""
    return service.update_product(product_id, product_data, partial=False)


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update a product (partial)",
    description="Update only the provided fields.",
    responses={400: {"description": "Validation failed"}, 404: {"description": "Product not found"}}
)
def patch_product(
    product_id: int,
    product_data: ProductInput,
    service: ProductServiceInterface = Depends(get_product_service)
):
    """
    Partial update.

    Only include fields you want to change; omitted or null fields keep their value.
    """
    return service.update_product(product_id, product_data, partial=True)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    description="Permanently delete a product by ID.",
    responses={404: {"description": "Product not found"}}
)
def delete_product(
    product_id: int,
    service: ProductServiceInterface = Depends(get_product_service)
):
    """Delete a product."""
    service.delete_product(product_id)
    return None
