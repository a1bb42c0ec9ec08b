"""
Principal model for authenticated requests
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

ADMIN_ROLE = "admin"


class Principal(BaseModel):
    """
    Authenticated identity for a single request.

    Built from the identity provider's verified claims plus the role read from
    the user's profile. Lives on request.state for the duration of the request
    and is never persisted.
    """

    uid: str
    role: Optional[str] = None
    claims: Dict[str, Any] = Field(default_factory=dict)

    def is_admin(self) -> bool:
        """Exact, case-sensitive match against the admin role"""
        return self.role == ADMIN_ROLE
