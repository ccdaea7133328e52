from decimal import Decimal


def format_price(product) -> str:
    """Render a product's price for display, e.g. ``$2,499.99``."""
    return f"${Decimal(product.price):,.2f}"
