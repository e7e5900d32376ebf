"""Product repository: the persistence boundary used by ProductService."""
from typing import Optional, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, Query

from catalog.models.product import Product
from catalog.schemas.product import ProductSearchCriteria


# Largest value the Integer primary key can hold on PostgreSQL
MAX_PRODUCT_ID = 2**31 - 1


class ProductRepository:
    """Handles database operations for Product entities."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, product_id: int) -> Optional[Product]:
        """Fetch a product by its ID, or None. IDs outside the column range match nothing."""
        if not 0 < product_id <= MAX_PRODUCT_ID:
            return None
        return self.db.get(Product, product_id)

    def find_page(self, limit: int, offset: int) -> List[Product]:
        """
        Fetch one page of products, newest first.

        Args:
            limit: Maximum number of products to return
            offset: Number of products to skip

        Returns:
            List of Product instances
        """
        return self._ordered(self.db.query(Product)).offset(offset).limit(limit).all()

    def count(self, criteria: Optional[ProductSearchCriteria] = None) -> int:
        """Count products matching ``criteria`` (all products when None)."""
        return self._filtered(criteria).count()

    def query_filtered(
        self,
        criteria: Optional[ProductSearchCriteria],
        limit: int,
        offset: int
    ) -> List[Product]:
        """
        Fetch one page of products matching ``criteria``, newest first.

        Args:
            criteria: Search filters, combined with AND
            limit: Maximum number of products to return
            offset: Number of products to skip

        Returns:
            List of Product instances
        """
        query = self._ordered(self._filtered(criteria))
        return query.offset(offset).limit(limit).all()

    def insert(self, product: Product) -> Product:
        """Persist a new product and return it with its assigned ID."""
        self.db.add(product)
        self._commit()
        self.db.refresh(product)
        return product

    def update(self, product: Product) -> None:
        """Write the current state of a loaded product."""
        self._commit()
        self.db.refresh(product)

    def remove(self, product: Product) -> None:
        """Permanently delete a product."""
        self.db.delete(product)
        self._commit()

    def _filtered(self, criteria: Optional[ProductSearchCriteria]) -> Query:
        query = self.db.query(Product)

        if criteria is None:
            return query

        if criteria.name is not None:
            query = query.filter(Product.name.like(f"%{criteria.name}%"))

        if criteria.min_price is not None:
            query = query.filter(Product.price >= criteria.min_price)

        if criteria.max_price is not None:
            query = query.filter(Product.price <= criteria.max_price)

        # in_stock=False means "no quantity filter", not "out of stock only"
        if criteria.in_stock:
            query = query.filter(Product.quantity > 0)

        return query

    @staticmethod
    def _ordered(query: Query) -> Query:
        return query.order_by(Product.created_at.desc(), Product.id.desc())

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
