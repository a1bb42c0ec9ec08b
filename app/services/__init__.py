"""
Services module initialization
"""

from .identity import IdentityVerifier
from .product import ProductService

__all__ = [
    "IdentityVerifier",
    "ProductService",
]
