"""Product read side."""

from protean.utils.globals import current_domain

from ordering.catalogue.product import Product


def product_fields(product: Product) -> dict:
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "image": product.image,
        "price": product.price,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


def get_product(product_id) -> dict:
    return product_fields(current_domain.repository_for(Product).get(product_id))


def list_products(limit: int = 100) -> list[dict]:
    """Products ordered by name."""
    repo = current_domain.repository_for(Product)
    products = repo._dao.query.order_by("name").limit(limit).all().items
    return [product_fields(product) for product in products]
