"""
Clients Package
Clients for external identity providers.
"""

from .identity_provider import (
    IdentityProvider,
    FirebaseIdentityProvider,
    JWTIdentityProvider,
    build_identity_provider,
)

__all__ = [
    "IdentityProvider",
    "FirebaseIdentityProvider",
    "JWTIdentityProvider",
    "build_identity_provider",
]
