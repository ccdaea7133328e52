from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import ProductNotFoundError, ProductValidationError
from app.schemas.product import (
    CategoryListResponse,
    ProductListResponse,
    ProductResponse,
    ValidationErrorResponse,
)
from app.services.product_store import ProductStore
from app.services.validation import ACTIVE_FLAG, VALIDATED_FIELDS, validate_product_input

router = APIRouter(prefix="/products", tags=["Products"])

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
SUBMITTED_FIELDS = VALIDATED_FIELDS + (ACTIVE_FLAG,)


async def read_submission(request: Request) -> Dict[str, Any]:
    """
    Read the request body as a raw field map.

    HTML forms and JSON objects are both accepted; an empty body is
    treated as an empty submission.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return dict(form)

    if not await request.body():
        return {}
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be a JSON object or form data"
        )
    if not isinstance(body, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be a JSON object or form data"
        )
    return body


def _validation_failed(error: ProductValidationError, submission: Dict[str, Any]) -> HTTPException:
    """Build a 422 that echoes what the user typed next to the errors."""
    old_input = {
        field: value
        for field, value in submission.items()
        if field in SUBMITTED_FIELDS and isinstance(value, (str, int, float, bool, type(None)))
    }
    body = ValidationErrorResponse(
        message="The given data was invalid.",
        errors=error.errors,
        old_input=old_input,
    )
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=body.model_dump()
    )


def _not_found(error: ProductNotFoundError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=str(error)
    )


@router.get(
    "/",
    response_model=ProductListResponse,
    summary="List all products",
    description="Get every product, newest first, optionally only active ones or one category."
)
def list_products(
    active: bool = Query(False, description="Only return active products"),
    category: Optional[str] = Query(None, description="Only return products in this category"),
    db: Session = Depends(get_db)
):
    """Get products ordered by creation time, most recent first."""
    store = ProductStore(db)
    products = store.list(active_only=active, category=category)

    return ProductListResponse(
        items=[ProductResponse.model_validate(p) for p in products],
        total=len(products)
    )


@router.get(
    "/categories",
    response_model=CategoryListResponse,
    summary="List categories",
    description="Distinct categories used by existing products."
)
def list_categories(db: Session = Depends(get_db)):
    store = ProductStore(db)
    return CategoryListResponse(categories=store.categories())


@router.post(
    "/",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a product from a JSON object or an HTML form submission."
)
def create_product(
    submission: Dict[str, Any] = Depends(read_submission),
    db: Session = Depends(get_db)
):
    """
    Create a new product.

    - **name**: Product name, max 255 characters (required)
    - **description**: Free text (optional)
    - **price**: Non-negative number, stored with 2 decimals (required)
    - **quantity**: Non-negative integer (required)
    - **category**: Category name, max 100 characters (required)
    - **is_active**: Checkbox flag; omitted means inactive
    """
    try:
        record = validate_product_input(submission)
    except ProductValidationError as e:
        raise _validation_failed(e, submission)

    store = ProductStore(db)
    return store.insert(record)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID",
    description="Get detailed information about a specific product."
)
def get_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    """Get a product by ID."""
    store = ProductStore(db)
    try:
        return store.find_by_id(product_id)
    except ProductNotFoundError as e:
        raise _not_found(e)


@router.api_route(
    "/{product_id}",
    methods=["PUT", "PATCH"],
    response_model=ProductResponse,
    summary="Update a product",
    description="Replace every editable field of a product. Omitting is_active deactivates it."
)
def update_product(
    product_id: int,
    submission: Dict[str, Any] = Depends(read_submission),
    db: Session = Depends(get_db)
):
    """
    Update a product.

    The submission is validated exactly like a create; the product's ID
    and creation time never change.
    """
    store = ProductStore(db)
    try:
        store.find_by_id(product_id)
    except ProductNotFoundError as e:
        raise _not_found(e)

    try:
        record = validate_product_input(submission)
    except ProductValidationError as e:
        raise _validation_failed(e, submission)

    try:
        return store.update(product_id, record)
    except ProductNotFoundError as e:
        raise _not_found(e)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    description="Delete a product by ID."
)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    """Delete a product."""
    store = ProductStore(db)
    try:
        store.delete(product_id)
    except ProductNotFoundError as e:
        raise _not_found(e)

    return None
