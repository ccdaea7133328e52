from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic_core import PydanticCustomError

from app.utils.formatting import format_price

# Largest value that fits a NUMERIC(10, 2) column, exclusive
MAX_PRICE = Decimal("100000000")
# Largest value a 32-bit INTEGER column holds
MAX_QUANTITY = 2147483647
CENTS = Decimal("0.01")


class ProductInput(BaseModel):
    """
    Normalized product record, ready for persistence.

    Only these fields are ever read from a submission; anything else
    in the input is ignored.
    """
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., max_length=255, description="Product name")
    description: Optional[str] = Field(None, description="Optional long description")
    price: Decimal = Field(..., ge=0, lt=MAX_PRICE, allow_inf_nan=False, description="Unit price")
    quantity: int = Field(..., ge=0, le=MAX_QUANTITY, description="Units in stock")
    category: str = Field(..., max_length=100, description="Product category")
    is_active: bool = Field(False, description="Whether the product is listed as active")

    @field_validator("price")
    @classmethod
    def round_price(cls, value: Decimal) -> Decimal:
        rounded = value.quantize(CENTS, rounding=ROUND_HALF_UP)
        if rounded >= MAX_PRICE:
            raise PydanticCustomError(
                "less_than",
                "Input should be less than {lt}",
                {"lt": MAX_PRICE},
            )
        return rounded


class ProductResponse(BaseModel):
    """Schema for product response including all fields."""
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    quantity: int
    category: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def formatted_price(self) -> str:
        return format_price(self)


class ProductListResponse(BaseModel):
    """Schema for product list response, newest first."""
    items: list[ProductResponse]
    total: int


class CategoryListResponse(BaseModel):
    categories: list[str]


class ValidationErrorResponse(BaseModel):
    """Body returned with a 422 so the client can redisplay the form."""
    message: str
    errors: Dict[str, str]
    old_input: Dict[str, Any]
