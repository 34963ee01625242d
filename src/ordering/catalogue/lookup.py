"""Catalogue lookup — which of a set of product identifiers exist."""

from collections.abc import Iterable

from protean.utils.globals import current_domain

from ordering.catalogue.product import Product


def existing_product_ids(product_ids: Iterable) -> set[str]:
    """Return the subset of `product_ids` that refer to stored products.

    Identifiers are compared as strings and duplicates collapse before the
    query, so a repeated identifier can never cause a false mismatch.
    """
    candidates = {str(product_id) for product_id in product_ids}
    if not candidates:
        return set()

    repo = current_domain.repository_for(Product)
    found = repo._dao.query.filter(id__in=sorted(candidates)).limit(len(candidates)).all().items
    return {str(product.id) for product in found}
