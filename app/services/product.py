"""
Product service containing business logic layer
"""

from typing import List

from app.core.logger import logger
from app.models.user import Principal
from app.repositories.product import ProductRepository
from app.schemas.product import ProductCreate, ProductResponse


class ProductService:
    """Service layer for catalog operations"""

    def __init__(self, repository: ProductRepository):
        self.repository = repository

    async def list_products(self) -> List[ProductResponse]:
        """Return the whole catalog"""
        products = await self.repository.list_all()

        logger.debug(
            f"Fetched {len(products)} products",
            metadata={"event": "list_products", "count": len(products)}
        )
        return products

    async def add_product(self, product_data: ProductCreate, added_by: Principal) -> ProductResponse:
        """Persist a new product"""
        product = await self.repository.create(product_data)

        logger.info(
            f"Created product {product.id}",
            user_id=added_by.uid,
            metadata={"event": "create_product", "product_id": product.id}
        )
        return product

    async def delete_product(self, product_id: str, deleted_by: Principal) -> None:
        """Delete a product; deleting an unknown id is not an error"""
        deleted = await self.repository.delete(product_id)

        logger.info(
            f"Deleted product {product_id}" if deleted else f"No product {product_id} to delete",
            user_id=deleted_by.uid,
            metadata={"event": "delete_product", "product_id": product_id, "deleted": deleted}
        )
