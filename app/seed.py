"""
Seed the database with a demo catalogue.

Usage:
    python -m app.seed            # add the demo products
    python -m app.seed --fresh    # delete existing products first
"""
import argparse
import logging

from app.database import SessionLocal, init_db
from app.models.product import Product
from app.services.product_store import ProductStore
from app.services.validation import validate_product_input

logger = logging.getLogger(__name__)

DEMO_PRODUCTS = [
    {
        "name": "MacBook Pro 16-inch M4 Max",
        "description": "M4 Max chip with 16-core CPU, 40-core GPU and up to 128GB unified memory.",
        "price": "2499.99",
        "quantity": "25",
        "category": "electronics",
        "is_active": "1",
    },
    {
        "name": "Mechanical Keyboard - Cherry MX Blue",
        "description": "Cherry MX Blue switches, N-key rollover, RGB backlight, aluminum frame.",
        "price": "149.99",
        "quantity": "50",
        "category": "electronics",
        "is_active": "1",
    },
    {
        "name": "The Go Programming Language (Book)",
        "description": "By Alan Donovan and Brian Kernighan. Language fundamentals, concurrency and testing.",
        "price": "39.99",
        "quantity": "100",
        "category": "books",
        "is_active": "1",
    },
    {
        "name": "Developer T-Shirt - Gopher Edition",
        "description": "Premium cotton t-shirt with the Go Gopher mascot, navy blue.",
        "price": "29.99",
        "quantity": "200",
        "category": "clothing",
        "is_active": "1",
    },
    {
        "name": "Coffee Beans - Ethiopian Yirgacheffe",
        "description": "Single-origin light roast with notes of blueberry and jasmine.",
        "price": "18.50",
        "quantity": "75",
        "category": "food",
        "is_active": "1",
    },
    {
        "name": "Standing Desk - Electric Adjustable",
        "description": "Memory presets, height from 28\" to 48\", walnut top on a steel frame.",
        "price": "599.00",
        "quantity": "15",
        "category": "home",
        "is_active": "1",
    },
    {
        # Inactive on purpose, to show the status flag
        "name": "Yoga Mat - Professional Grade",
        "description": "Extra thick (6mm) non-slip mat with carrying strap.",
        "price": "45.00",
        "quantity": "60",
        "category": "sports",
    },
    {
        "name": "Laravel Up and Running (Book)",
        "description": "By Matt Stauffer. Routing, templates, ORM, testing and deployment.",
        "price": "44.99",
        "quantity": "80",
        "category": "books",
        "is_active": "1",
    },
]


def seed(db, fresh: bool = False) -> int:
    """
    Insert the demo products through the normal validation path.

    Returns:
        Number of products inserted
    """
    if fresh:
        deleted = db.query(Product).delete()
        db.commit()
        logger.info(f"Removed {deleted} existing products")

    store = ProductStore(db)
    for data in DEMO_PRODUCTS:
        store.insert(validate_product_input(data))

    logger.info(f"Seeded {len(DEMO_PRODUCTS)} products")
    return len(DEMO_PRODUCTS)


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Seed the product catalogue with demo data.")
    parser.add_argument("--fresh", action="store_true", help="delete existing products first")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    init_db()
    db = SessionLocal()
    try:
        seed(db, fresh=args.fresh)
    finally:
        db.close()


if __name__ == "__main__":
    main()
