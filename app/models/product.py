from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
)

from app.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """
    Product model representing one inventory item.

    Plain data record: persistence goes through ProductStore.

    Attributes:
        id: Unique identifier assigned on insert
        name: Product name
        description: Optional long description
        price: Unit price with 2 fractional digits (non-negative)
        quantity: Units in stock (non-negative)
        category: Category slug, "general" by default
        is_active: Display/filter flag; inactive products stay editable
        created_at: Timestamp when product was created
        updated_at: Timestamp when product was last updated
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)
    category = Column(String(100), nullable=False, default="general", index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    # Database-level constraints to ensure data integrity
    __table_args__ = (
        CheckConstraint("price >= 0", name="check_price_non_negative"),
        CheckConstraint("quantity >= 0", name="check_quantity_non_negative"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', category='{self.category}')>"
