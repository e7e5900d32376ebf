from pydantic import AliasChoices, BaseModel, Field, ConfigDict, field_serializer, field_validator
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

NAME_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 5000
PRICE_LIMIT = Decimal("1000000")
QUANTITY_LIMIT = 1_000_000
PRICE_QUANTUM = Decimal("0.01")


def to_price(value):
    """Normalize a price to two fractional digits. Values that can't be quantized pass through."""
    if value is None:
        return None
    try:
        return Decimal(str(value)).quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return value


class ProductInput(BaseModel):
    """
    Caller-supplied product data for create, PUT and PATCH.

    Every field is optional so the same shape can carry partial updates.
    Range rules are applied by ProductValidator, not here.
    """
    name: Optional[str] = Field(None, description="Product name", examples=["Wireless Keyboard"])
    description: Optional[str] = Field(
        None,
        description="Product description",
        examples=["A high-quality wireless keyboard with RGB lighting"],
    )
    price: Optional[Decimal] = Field(None, description="Product price in dollars", examples=[49.99])
    quantity: Optional[int] = Field(None, description="Stock quantity available", examples=[100])

    def provided_fields(self) -> dict:
        """Fields carrying a non-null value."""
        return self.model_dump(exclude_none=True)


class ProductPatchRules(BaseModel):
    """Constraints checked on a partial update. Only the fields sent are validated."""
    name: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    price: Optional[Decimal] = Field(None, gt=0, lt=PRICE_LIMIT)
    quantity: Optional[int] = Field(None, ge=0, lt=QUANTITY_LIMIT)

    @field_validator("price", mode="before")
    @classmethod
    def round_price(cls, value):
        # Range checks apply to the value that will be stored
        return to_price(value)


class ProductRules(ProductPatchRules):
    """Constraints checked on create and full update."""
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    price: Decimal = Field(gt=0, lt=PRICE_LIMIT)
    quantity: int = Field(ge=0, lt=QUANTITY_LIMIT)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Value cannot be blank")
        return value


class ProductSearchCriteria(BaseModel):
    """Optional filters for product search. Provided filters are combined with AND."""
    name: Optional[str] = Field(None, description="Substring match on product name")
    min_price: Optional[Decimal] = Field(None, description="Minimum price (inclusive)")
    max_price: Optional[Decimal] = Field(None, description="Maximum price (inclusive)")
    in_stock: Optional[bool] = Field(None, description="Only products with quantity > 0 when true")


class ProductResponse(BaseModel):
    """Schema for product response including all fields."""
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    quantity: int
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt"
    )
    updated_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt"
    )
    in_stock: bool = Field(
        validation_alias=AliasChoices("in_stock", "inStock"),
        serialization_alias="inStock"
    )

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> str:
        return f"{price:.2f}"

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        # Stored in UTC; SQLite hands timestamps back without an offset
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()


class PaginationMeta(BaseModel):
    """Pagination details for a product list."""
    total: int
    page: int
    limit: int
    pages: int


class ProductListResponse(BaseModel):
    """Schema for paginated product list response."""
    data: list[ProductResponse]
    meta: PaginationMeta
