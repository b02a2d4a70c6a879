"""Authentication dependencies for FastAPI."""

from functools import lru_cache
from typing import Annotated, Awaitable, Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import settings
from core.exceptions import AuthenticationError, AuthorizationError, ErrorCode
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import IAuthProvider, TokenUser

# auto_error=False so a missing header is reported in the API's error shape
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_auth_provider() -> IAuthProvider:
    """Get the token provider (overridden in tests)."""
    return JWTAuthProvider()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """Resolve the caller from the bearer token.

    Raises:
        AuthenticationError: UNAUTHORIZED without a token, INVALID_TOKEN when
            the token is malformed, badly signed, expired or has no subject.
    """
    if not credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    user = await auth_provider.validate_token(credentials.credentials)
    if not user:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )
    return user


def require_role(role: str) -> Callable[[TokenUser], Awaitable[TokenUser]]:
    """Build a dependency that admits only callers holding ``role``."""

    async def dependency(user: TokenUser = Depends(get_current_user)) -> TokenUser:
        if not user.has_role(role):
            raise AuthorizationError(f"Role required: {role}")
        return user

    return dependency


# Any authenticated caller
CurrentUser = Annotated[TokenUser, Depends(get_current_user)]
# Authenticated caller holding the member role
CurrentMember = Annotated[TokenUser, Depends(require_role(settings.member_role))]
