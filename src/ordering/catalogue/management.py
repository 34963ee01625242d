"""Product management — commands and handler."""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.catalogue.product import Product
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=255)
    description = Text()
    image = String(max_length=255)
    price = Float(required=True, min_value=0.0)


@ordering.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    description = Text()
    image = String(max_length=255)
    price = Float(min_value=0.0)


@ordering.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            price=command.price,
            description=command.description,
            image=command.image,
        )
        current_domain.repository_for(Product).add(product)

        logger.info("Product created", product_id=str(product.id), price=product.price)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update(
            name=command.name,
            description=command.description,
            image=command.image,
            price=command.price,
        )
        repo.add(product)

        logger.info("Product updated", product_id=str(product.id))
