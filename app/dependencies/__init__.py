"""
Dependencies module initialization
"""

from .auth import get_current_principal, get_identity_verifier, require_admin
from .product import get_product_service

__all__ = [
    "get_current_principal",
    "get_identity_verifier",
    "require_admin",
    "get_product_service",
]
