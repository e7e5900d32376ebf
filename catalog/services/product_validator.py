from pydantic import ValidationError

from catalog.schemas.product import ProductInput, ProductPatchRules, ProductRules


class ProductValidator:
    """
    Validates ProductInput against the product constraints.

    Two modes:
    - full (create, PUT): checked with ProductRules, required fields must be present
    - partial (PATCH): checked with ProductPatchRules, only fields present
      in the input are validated

    Each field reports a single message; pydantic stops at the first failing
    constraint for a field.
    """

    REQUIRED_MESSAGES = {
        "name": "Product name is required",
        "price": "Price is required",
        "quantity": "Quantity is required",
    }

    MESSAGES = {
        ("name", "string_too_long"): "Name cannot exceed 255 characters",
        ("description", "string_too_long"): "Description cannot exceed 5000 characters",
        ("price", "greater_than"): "Price must be a positive number",
        ("price", "less_than"): "Price cannot exceed 999,999.99",
        ("quantity", "greater_than_equal"): "Quantity cannot be negative",
        ("quantity", "less_than"): "Quantity cannot exceed 999,999",
    }

    # Error types that mean "no usable value" for a required field
    MISSING_TYPES = {"missing", "string_too_short", "value_error"}

    def validate(self, data: ProductInput, partial: bool = False) -> dict[str, str]:
        """
        Check ``data`` and return a mapping of field name to error message.

        An empty mapping means the input is valid.
        """
        rules = ProductPatchRules if partial else ProductRules

        try:
            rules.model_validate(data.provided_fields())
        except ValidationError as e:
            errors: dict[str, str] = {}
            for error in e.errors():
                field = str(error["loc"][0]) if error["loc"] else "body"
                errors.setdefault(field, self._message(field, error))
            return errors

        return {}

    def _message(self, field: str, error: dict) -> str:
        if error["type"] in self.MISSING_TYPES and field in self.REQUIRED_MESSAGES:
            return self.REQUIRED_MESSAGES[field]
        return self.MESSAGES.get((field, error["type"]), error["msg"])
