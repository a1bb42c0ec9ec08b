"""
Product repository for data access layer following Repository pattern
"""

import asyncio
from typing import List, Optional

from bson import ObjectId
from bson.errors import BSONError
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from app.core.errors import StoreUnavailable
from app.core.logger import logger
from app.schemas.product import ProductCreate, ProductResponse


class ProductRepository:
    """Repository for product data access operations"""

    def __init__(self, collection: AsyncIOMotorCollection, timeout: Optional[float] = None):
        self.collection = collection
        self.timeout = timeout

    def _doc_to_response(self, doc: dict) -> ProductResponse:
        """Convert MongoDB document to ProductResponse schema"""
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        return ProductResponse(**doc)

    async def _run(self, operation, failure_message: str):
        try:
            return await asyncio.wait_for(operation, timeout=self.timeout)
        # Encoding errors (oversized ints, invalid keys) surface from the driver too
        except (PyMongoError, BSONError, OverflowError, asyncio.TimeoutError) as e:
            logger.error(
                f"MongoDB error: {failure_message}",
                error=e,
                metadata={"event": "store_error", "collection": self.collection.name}
            )
            raise StoreUnavailable(failure_message, error=e)

    async def list_all(self) -> List[ProductResponse]:
        """Fetch every product in creation order"""
        cursor = self.collection.find({}).sort("_id", 1)
        docs = await self._run(cursor.to_list(length=None), "Failed to fetch products")
        return [self._doc_to_response(doc) for doc in docs]

    async def create(self, product_data: ProductCreate) -> ProductResponse:
        """Insert a product and return it with its assigned id"""
        doc = product_data.to_document()
        result = await self._run(self.collection.insert_one(doc), "Failed to add product")
        doc["_id"] = result.inserted_id
        return self._doc_to_response(doc)

    async def delete(self, product_id: str) -> bool:
        """Hard delete a product; returns whether a document was removed"""
        # A malformed id cannot match any stored document
        if not ObjectId.is_valid(product_id):
            return False

        result = await self._run(
            self.collection.delete_one({"_id": ObjectId(product_id)}),
            "Failed to delete product"
        )
        return result.deleted_count > 0
