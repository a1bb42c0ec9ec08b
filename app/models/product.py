"""
Product model shared by request and response schemas
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductBase(BaseModel):
    """
    Catalog product fields.

    Values are stored exactly as received: no type, presence or range checks
    are applied. The image URL is exposed and persisted as ``imageUrl``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[Any] = None
    price: Optional[Any] = None
    description: Optional[Any] = None
    image_url: Optional[Any] = Field(default=None, alias="imageUrl")

    def to_document(self) -> dict:
        """Mongo document for insertion; fields absent from the request are left out"""
        return self.model_dump(by_alias=True, exclude_unset=True)
