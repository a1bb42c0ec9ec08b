"""
Product API endpoints following FastAPI best practices
Listing is public; adding and deleting require an admin principal.
"""

from fastapi import APIRouter, Depends, status

from app.core.errors import ErrorResponseModel
from app.dependencies.auth import require_admin
from app.dependencies.product import get_product_create, get_product_service
from app.models.user import Principal
from app.schemas.product import (
    MessageResponse,
    ProductCreate,
    ProductCreatedResponse,
    ProductListResponse,
)
from app.services.product import ProductService

router = APIRouter()

ADMIN_ERRORS = {
    401: {"model": ErrorResponseModel},
    403: {"model": ErrorResponseModel},
    500: {"model": ErrorResponseModel},
    503: {"model": ErrorResponseModel},
}


@router.get(
    "",
    response_model=ProductListResponse,
    responses={500: {"model": ErrorResponseModel}},
)
async def list_products(service: ProductService = Depends(get_product_service)):
    """
    Get all products. No authentication required.
    """
    products = await service.list_products()
    return ProductListResponse(products=products)


@router.post(
    "",
    response_model=ProductCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**ADMIN_ERRORS, 422: {"model": ErrorResponseModel}},
    openapi_extra={
        "requestBody": {
            "required": False,
            "content": {"application/json": {"schema": ProductCreate.model_json_schema(by_alias=True)}},
        }
    },
)
async def add_product(
    principal: Principal = Depends(require_admin),
    product: ProductCreate = Depends(get_product_create),
    service: ProductService = Depends(get_product_service),
):
    """
    Add a product. Requires admin role; the body is only read once the
    caller is authorized.
    """
    created = await service.add_product(product, added_by=principal)
    return ProductCreatedResponse(product=created)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses=ADMIN_ERRORS,
)
async def delete_product(
    product_id: str,
    principal: Principal = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    """
    Delete a product. Requires admin role.
    Succeeds whether or not the product existed.
    """
    await service.delete_product(product_id, deleted_by=principal)
    return MessageResponse(message="Product deleted successfully")
