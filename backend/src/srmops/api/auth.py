"""Authentication and authorization for SRM Ops.

Bearer tokens are JWTs signed with the shared ``AUTH_SECRET``. Admin rights
come from a single allow-list policy derived from the ``ADMIN_EMAILS``
setting.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated, Iterable

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from ..config import get_settings
from ..logging import log_security_event
from ..records.models import utcnow
from . import AuthenticationError, AuthorizationError

# Security scheme
security = HTTPBearer(auto_error=False)


# =========================
# User Models
# =========================


class User(BaseModel):
    """Authenticated user information."""

    id: str
    email: str
    name: str | None = None


class TokenPayload(BaseModel):
    """JWT token payload."""

    sub: str  # Subject (user ID)
    email: str
    name: str | None = None
    exp: int  # Expiration time (epoch seconds)
    iat: int  # Issued at time (epoch seconds)


# =========================
# JWT Functions
# =========================


def create_access_token(user: User, expires_in: timedelta | None = None) -> str:
    """Create a JWT access token for a user.

    Args:
        user: User to create token for
        expires_in: Lifetime override (defaults to AUTH_TOKEN_EXPIRATION_HOURS)

    Returns:
        Encoded JWT token
    """
    settings = get_settings()

    now = utcnow()
    lifetime = expires_in or timedelta(hours=settings.auth_token_expiration_hours)
    payload = {
        "sub": user.id,
        "email": user.email,
        "name": user.name,
        "iat": now,
        "exp": now + lifetime,
    }

    return jwt.encode(payload, settings.auth_secret, algorithm=settings.auth_algorithm)


def decode_access_token(token: str) -> TokenPayload:
    """Decode and validate a JWT access token.

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.auth_secret,
            algorithms=[settings.auth_algorithm],
            options={"require": ["sub", "exp"]},
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise AuthenticationError(f"Invalid token: {e}")
    except ValueError:
        raise AuthenticationError("Invalid token payload")


# =========================
# Admin policy
# =========================


class AdminPolicy:
    """Decides whether a user may act on every user's records."""

    def __init__(self, admin_emails: Iterable[str]):
        self._admin_emails = frozenset(e.strip().lower() for e in admin_emails if e.strip())

    def is_admin(self, user: User) -> bool:
        return user.email.strip().lower() in self._admin_emails


@lru_cache
def get_admin_policy() -> AdminPolicy:
    """Admin policy built once from settings."""
    return AdminPolicy(get_settings().admin_emails_list)


# =========================
# Dependency Injection
# =========================


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    """Get the current authenticated user.

    Raises:
        AuthenticationError: If not authenticated
    """
    if not credentials:
        raise AuthenticationError("Authentication required")

    payload = decode_access_token(credentials.credentials)
    request.state.user_id = payload.sub
    return User(id=payload.sub, email=payload.email, name=payload.name)


CurrentUser = Annotated[User, Depends(get_current_user)]
Admins = Annotated[AdminPolicy, Depends(get_admin_policy)]


def ensure_admin(user: User, policy: AdminPolicy, action: str) -> None:
    """Raise AuthorizationError unless ``user`` is on the admin allow-list."""
    if not policy.is_admin(user):
        log_security_event("admin_access_denied", user.id, {"action": action})
        raise AuthorizationError("Administrator access required")


async def require_admin(user: CurrentUser, policy: Admins) -> User:
    """Dependency that requires an admin caller."""
    ensure_admin(user, policy, "admin_route")
    return user


AdminUser = Annotated[User, Depends(require_admin)]
