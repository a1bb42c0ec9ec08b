"""
Authentication dependencies for FastAPI
Authorization pipeline for privileged routes:

1. extract the bearer token from the Authorization header
2. verify it with the identity provider and resolve the caller's role
3. attach the Principal to request.state
4. (admin routes) require the "admin" role

Public routes declare none of these dependencies.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from app.core.errors import AccessDenied, Forbidden, InvalidCredential, Unauthenticated
from app.core.logger import logger
from app.models.user import Principal
from app.services.identity import IdentityVerifier


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Return the second whitespace-delimited segment of the header.
    The scheme itself is not checked.
    """
    parts = (authorization or "").split()
    if len(parts) < 2:
        raise Unauthenticated()
    return parts[1]


def get_identity_verifier(request: Request) -> IdentityVerifier:
    """IdentityVerifier constructed at startup"""
    return request.app.state.identity_verifier


async def get_current_principal(
    request: Request,
    authorization: Optional[str] = Header(None),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Principal:
    """
    Dependency to authenticate the caller.
    Raises 401 without a token and 403 when the provider rejects it.

    Usage:
        @router.post("")
        async def create_item(principal: Principal = Depends(get_current_principal)):
            pass
    """
    token = extract_bearer_token(authorization)

    try:
        principal = await verifier.verify(token)
    except InvalidCredential as e:
        logger.warning(f"Authentication failed: {e.reason}", metadata={"event": "invalid_credential"})
        raise Forbidden(details={"reason": e.reason})

    request.state.principal = principal
    return principal


async def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    """
    Dependency to require the admin role.
    Only runs once get_current_principal has authenticated the caller.

    Usage:
        @router.delete("/{id}")
        async def delete_item(principal: Principal = Depends(require_admin)):
            pass
    """
    if not principal.is_admin():
        logger.warning(
            "Admin access denied",
            user_id=principal.uid,
            metadata={"event": "access_denied", "role": principal.role}
        )
        raise AccessDenied()
    return principal
