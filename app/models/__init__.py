"""
Models module initialization
"""

from .product import ProductBase
from .user import Principal, ADMIN_ROLE

__all__ = [
    "ProductBase",
    "Principal",
    "ADMIN_ROLE",
]
