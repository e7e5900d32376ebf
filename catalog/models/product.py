from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, CheckConstraint, Index

from catalog.database import Base


class Product(Base):
    """
    Product model representing items in the catalog.

    Attributes:
        id: Unique identifier for the product
        name: Product name
        description: Optional long description
        price: Product price, two fractional digits (must be positive)
        quantity: Available quantity (must be non-negative)
        created_at: Timestamp when product was created
        updated_at: Timestamp of the last update, None until the first one

    Timestamps are stamped by ProductService, not by database defaults.
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    # Database-level constraints to ensure data integrity
    __table_args__ = (
        CheckConstraint('price > 0', name='check_price_positive'),
        CheckConstraint('quantity >= 0', name='check_quantity_non_negative'),
        Index('idx_product_name', 'name'),
        Index('idx_product_price', 'price'),
        Index('idx_product_created_at', 'created_at'),
    )

    @property
    def in_stock(self) -> bool:
        """Whether the product is currently in stock."""
        return (self.quantity or 0) > 0

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', quantity={self.quantity})>"
