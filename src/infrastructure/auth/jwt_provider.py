"""JWT authentication provider implementation.

Token payload structure:
    {
        "sub": "lisa",
        "roles": ["Member"],
        "exp": 1234567890
    }

A single ``role`` string claim is accepted in place of ``roles``.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)


class JWTAuthProvider:
    """JWT-based authentication provider using a shared secret."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT token and extract the caller.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except JWTError as e:
            logger.debug("Rejected token: %s", e)
            return None

        return TokenUser.from_claims(payload)

    def create_token(self, user: TokenUser) -> str:
        """
        Create a JWT token for a user.

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": user.username,
            "roles": list(user.roles),
            "exp": expire,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

