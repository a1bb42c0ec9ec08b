"""
API schemas for Product endpoints following FastAPI best practices
"""

from typing import List

from pydantic import BaseModel, ConfigDict

from app.models.product import ProductBase


class ProductCreate(ProductBase):
    """
    Schema for adding a product.

    Permissive by contract: every field is optional and accepts any JSON
    value; unknown fields are dropped.
    """


class ProductResponse(ProductBase):
    """Schema for product responses including the store-assigned id"""
    id: str

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class ProductListResponse(BaseModel):
    """Response schema for the public catalog listing"""
    success: bool = True
    products: List[ProductResponse]


class ProductCreatedResponse(BaseModel):
    """Response schema for a newly added product"""
    success: bool = True
    message: str = "Product added successfully"
    product: ProductResponse


class MessageResponse(BaseModel):
    """Response schema for operations without a payload"""
    success: bool = True
    message: str
