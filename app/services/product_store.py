from contextlib import contextmanager
from typing import Iterable, List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import ProductNotFoundError, StorageError
from app.models.product import Product, utc_now
from app.schemas.product import ProductInput

logger = logging.getLogger(__name__)


def filter_active(products: Iterable[Product]) -> List[Product]:
    """Keep only products flagged as active."""
    return [product for product in products if product.is_active]


def filter_by_category(products: Iterable[Product], category: str) -> List[Product]:
    """Keep only products whose category matches exactly."""
    return [product for product in products if product.category == category]


class ProductStore:
    """
    Repository for Product records.

    This store handles:
    - Inserting validated products
    - Looking products up by ID
    - Overwriting a product with a validated record
    - Deleting products
    - Listing products newest first

    Every mutating call commits its own transaction. Database failures
    roll the session back and surface as StorageError.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _storage_errors(self, action: str):
        try:
            yield
        # The driver raises OverflowError itself when a value cannot be bound
        except (SQLAlchemyError, OverflowError) as e:
            self.db.rollback()
            logger.error(f"Database error during product {action}: {e}")
            raise StorageError(f"Could not {action} product") from e

    def insert(self, record: ProductInput) -> Product:
        """
        Persist a new product.

        Args:
            record: Validated product data

        Returns:
            The stored product with its generated ID and timestamps
        """
        now = utc_now()
        product = Product(**record.model_dump(), created_at=now, updated_at=now)

        with self._storage_errors("insert"):
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)

        logger.info(f"Product #{product.id} created")
        return product

    def find_by_id(self, product_id: int) -> Product:
        """
        Get a product by ID.

        Raises:
            ProductNotFoundError: If no product has this ID
        """
        with self._storage_errors("lookup"):
            product = self.db.query(Product).filter(Product.id == product_id).first()

        if not product:
            raise ProductNotFoundError(product_id)
        return product

    def update(self, product_id: int, record: ProductInput) -> Product:
        """
        Overwrite every mutable field of an existing product.

        ``id`` and ``created_at`` are left untouched; ``updated_at`` is
        refreshed even when no field value changed.

        Raises:
            ProductNotFoundError: If no product has this ID
        """
        product = self.find_by_id(product_id)

        for field, value in record.model_dump().items():
            setattr(product, field, value)
        product.updated_at = utc_now()

        with self._storage_errors("update"):
            self.db.commit()
            self.db.refresh(product)

        logger.info(f"Product #{product_id} updated")
        return product

    def delete(self, product_id: int) -> None:
        """
        Delete a product.

        Raises:
            ProductNotFoundError: If no product has this ID
        """
        product = self.find_by_id(product_id)

        with self._storage_errors("delete"):
            self.db.delete(product)
            self.db.commit()

        logger.info(f"Product #{product_id} deleted")

    def categories(self) -> List[str]:
        """Distinct categories currently in use, alphabetically."""
        with self._storage_errors("lookup"):
            rows = self.db.query(Product.category).distinct().order_by(Product.category).all()
        return [row[0] for row in rows]

    def list(self, active_only: bool = False, category: Optional[str] = None) -> List[Product]:
        """
        Get all products, most recently created first.

        Args:
            active_only: Keep only active products
            category: Keep only products in this category

        Returns:
            Ordered list of products
        """
        with self._storage_errors("list"):
            products = (
                self.db.query(Product)
                .order_by(Product.created_at.desc(), Product.id.desc())
                .all()
            )

        if active_only:
            products = filter_active(products)
        if category:
            products = filter_by_category(products, category)
        return products
