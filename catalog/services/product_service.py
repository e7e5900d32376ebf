from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional
import logging
import math

from catalog.exceptions import ProductNotFoundError, ProductValidationError
from catalog.models.product import Product
from catalog.schemas.product import ProductInput, ProductSearchCriteria, to_price
from catalog.services.product_repository import ProductRepository
from catalog.services.product_validator import ProductValidator

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@dataclass
class ProductPage:
    """One page of products plus the pagination details."""
    items: List[Product] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10
    page_count: int = 0


def clamp_pagination(page: int, limit: int) -> tuple[int, int, int]:
    """
    Clamp page/limit to their allowed ranges.

    Returns:
        Tuple of (page, limit, offset)
    """
    page = max(1, page)
    limit = min(MAX_PAGE_SIZE, max(1, limit))
    offset = (page - 1) * limit
    return page, limit, offset


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProductServiceInterface(ABC):
    """Business operations on products."""

    @abstractmethod
    def list_products(self, page: int = 1, limit: int = 10) -> ProductPage:
        """Paginated list of all products, newest first."""

    @abstractmethod
    def get_product(self, product_id: int) -> Product:
        """Single product by ID. Raises ProductNotFoundError."""

    @abstractmethod
    def create_product(self, data: ProductInput) -> Product:
        """Create a product. Raises ProductValidationError."""

    @abstractmethod
    def update_product(self, product_id: int, data: ProductInput, partial: bool = False) -> Product:
        """
        Update a product. With ``partial`` only the provided fields change (PATCH).
        Raises ProductNotFoundError or ProductValidationError.
        """

    @abstractmethod
    def delete_product(self, product_id: int) -> None:
        """Delete a product. Raises ProductNotFoundError."""

    @abstractmethod
    def search_products(
        self,
        criteria: Optional[ProductSearchCriteria],
        page: int = 1,
        limit: int = 10
    ) -> ProductPage:
        """Paginated search, newest first."""


class ProductService(ProductServiceInterface):
    """
    Service class for Product operations.

    This service handles:
    - Validating input (full for create/PUT, partial for PATCH)
    - Creating, reading, updating and deleting products
    - Pagination clamping and search filters
    - Stamping created_at / updated_at

    Every failure is raised before the repository write path is reached.
    """

    def __init__(
        self,
        repository: ProductRepository,
        validator: ProductValidator,
        logger: logging.Logger = logger,
        clock: Callable[[], datetime] = utc_now
    ):
        self.repository = repository
        self.validator = validator
        self.logger = logger
        self.clock = clock

    def list_products(self, page: int = 1, limit: int = 10) -> ProductPage:
        page, limit, offset = clamp_pagination(page, limit)

        products = self.repository.find_page(limit=limit, offset=offset)
        total = self.repository.count()

        self.logger.debug(f"Retrieved products list: page={page}, limit={limit}, total={total}")

        return self._page(products, total, page, limit)

    def get_product(self, product_id: int) -> Product:
        product = self.repository.find_by_id(product_id)

        if product is None:
            self.logger.warning(f"Product #{product_id} not found")
            raise ProductNotFoundError(product_id)

        return product

    def create_product(self, data: ProductInput) -> Product:
        self._validate(data, partial=False)

        product = Product()
        self._apply(data, product, partial=False)
        product.created_at = self.clock()
        product.updated_at = None

        product = self.repository.insert(product)

        self.logger.info(f"Product #{product.id} created: {product.name}")

        return product

    def update_product(self, product_id: int, data: ProductInput, partial: bool = False) -> Product:
        product = self.get_product(product_id)

        self._validate(data, partial=partial)

        self._apply(data, product, partial=partial)
        product.updated_at = self.clock()

        self.repository.update(product)

        self.logger.info(f"Product #{product.id} updated (partial={partial})")

        return product

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)

        self.repository.remove(product)

        self.logger.info(f"Product #{product_id} deleted")

    def search_products(
        self,
        criteria: Optional[ProductSearchCriteria],
        page: int = 1,
        limit: int = 10
    ) -> ProductPage:
        page, limit, offset = clamp_pagination(page, limit)

        products = self.repository.query_filtered(criteria, limit=limit, offset=offset)
        total = self.repository.count(criteria)

        self.logger.debug(f"Searched products: criteria={criteria}, page={page}, limit={limit}, total={total}")

        return self._page(products, total, page, limit)

    def _validate(self, data: ProductInput, partial: bool) -> None:
        errors = self.validator.validate(data, partial=partial)
        if errors:
            self.logger.info(f"Product validation failed: {errors}")
            raise ProductValidationError(errors)

    @staticmethod
    def _apply(data: ProductInput, product: Product, partial: bool) -> None:
        """Copy input fields onto the entity. In partial mode null fields are left alone."""
        if not partial or data.name is not None:
            product.name = data.name

        if not partial or data.description is not None:
            product.description = data.description

        if not partial or data.price is not None:
            product.price = to_price(data.price)

        if not partial or data.quantity is not None:
            product.quantity = data.quantity

    @staticmethod
    def _page(products: List[Product], total: int, page: int, limit: int) -> ProductPage:
        return ProductPage(
            items=list(products),
            total=total,
            page=page,
            limit=limit,
            page_count=math.ceil(total / limit)
        )

