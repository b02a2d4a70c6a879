"""Authentication provider protocol and the authenticated caller."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol


@dataclass
class TokenUser:
    """The caller named by a validated token.

    ``username`` is the token subject, lowercased to match stored usernames.
    """

    username: str
    roles: list[str] = field(default_factory=list)

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> Optional["TokenUser"]:
        """Build a caller from decoded claims; None when there is no subject.

        Roles come from a ``roles`` list (or single string), falling back to a
        singular ``role`` claim.
        """
        subject = claims.get("sub")
        if not subject:
            return None

        roles = claims.get("roles")
        if roles is None:
            roles = [claims["role"]] if claims.get("role") else []
        elif isinstance(roles, str):
            roles = [roles]

        return cls(username=str(subject).lower(), roles=[str(r) for r in roles])

    def has_role(self, role: str) -> bool:
        return role in self.roles


class IAuthProvider(Protocol):
    """Issues and validates bearer tokens."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the caller for a valid token, None for anything else."""
        ...

    def create_token(self, user: TokenUser) -> str: ...
