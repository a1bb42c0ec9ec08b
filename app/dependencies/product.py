"""
Dependency injection for Product service and repository
"""

import json

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.core.config import config
from app.repositories.product import ProductRepository
from app.schemas.product import ProductCreate
from app.services.product import ProductService


def get_product_repository(request: Request) -> ProductRepository:
    """Repository bound to the startup Database's products collection"""
    return ProductRepository(request.app.state.database.products, timeout=config.external_call_timeout)


def get_product_service(
    repository: ProductRepository = Depends(get_product_repository)
) -> ProductService:
    """Get product service instance"""
    return ProductService(repository)


async def get_product_create(request: Request) -> ProductCreate:
    """
    Parse the product body on demand.

    Declared after the authorization dependency on a route so that a
    request with a bad or missing credential is rejected before its body
    is looked at. An empty body is an empty product.
    """
    body = await request.body()
    if not body.strip():
        return ProductCreate()

    try:
        payload = json.loads(body)
    except ValueError as e:
        raise RequestValidationError([{
            "type": "json_invalid",
            "loc": ("body",),
            "msg": "JSON decode error",
            "input": {},
            "ctx": {"error": str(e)},
        }])

    try:
        return ProductCreate.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in e.errors(include_url=False)]
        )
