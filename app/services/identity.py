"""
Identity verification service
Turns a bearer token into a per-request Principal using the identity provider.
"""

import asyncio
from typing import Optional

from app.clients.identity_provider import IdentityProvider
from app.core.errors import IdentityProviderUnavailable
from app.core.logger import logger
from app.models.user import Principal


class IdentityVerifier:
    """
    Verifies bearer tokens and resolves the caller's role.

    Every call makes two provider round trips (token verification, then the
    profile lookup) and nothing is cached between requests, so role changes
    take effect on the next request.
    """

    def __init__(self, provider: IdentityProvider, timeout: Optional[float] = None):
        self.provider = provider
        self.timeout = timeout

    async def _call(self, operation, step: str):
        try:
            return await asyncio.wait_for(operation, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(
                f"Identity provider timed out during {step}",
                metadata={"event": "identity_provider_timeout", "provider": self.provider.name, "timeout": self.timeout}
            )
            raise IdentityProviderUnavailable(f"Identity provider timed out during {step}", error=e)

    async def verify(self, token: str) -> Principal:
        """
        Verify a token and build the Principal.

        Raises:
            InvalidCredential: the provider rejected the token
            IdentityProviderUnavailable: the provider failed or timed out
        """
        claims = await self._call(self.provider.verify_token(token), "token verification")
        uid = claims["uid"]

        profile = await self._call(self.provider.get_profile(uid), "profile lookup")
        raw_role = profile.get("role") if profile else None
        # Roles are compared as strings; anything else grants nothing
        role = raw_role if isinstance(raw_role, str) else None

        logger.debug(
            "Token verified",
            user_id=uid,
            metadata={"event": "token_verified", "provider": self.provider.name, "has_profile": profile is not None}
        )
        return Principal(uid=uid, role=role, claims=claims)
