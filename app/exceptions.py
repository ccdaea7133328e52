from typing import Dict


class ProductValidationError(Exception):
    """Raised when submitted product fields fail validation."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__(f"Invalid product data: {', '.join(sorted(errors))}")


class ProductNotFoundError(Exception):
    """Exception raised when the requested product doesn't exist."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")


class StorageError(Exception):
    """Exception raised when the database fails during a product operation."""
    pass
