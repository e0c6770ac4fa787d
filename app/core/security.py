"""
Authentication primitives.

Identity comes from a bearer JWT issued by the identity provider; the token
subject is the user id. Authorization decisions in the core use AuthContext,
which the API builds from the token and the stored user record.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from app.core.config import settings
from app.core.exceptions import AccessDenied
from app.core.logging import get_logger
from app.models import UserRole

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class TokenData(BaseModel):
    """Claims extracted from a validated access token."""

    sub: str
    email: Optional[str] = None
    username: Optional[str] = None


class AuthContext(BaseModel):
    """Authenticated, authorized caller handed to every core operation."""

    user_id: str
    role: UserRole
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def ensure_admin(auth: AuthContext) -> None:
    if not auth.is_admin:
        logger.warning(f"User {auth.user_id} denied access to an admin operation")
        raise AccessDenied()


def create_access_token(
    sub: str,
    email: Optional[str] = None,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """Issue a signed token. Used by local tooling and tests."""
    now = datetime.now(timezone.utc)
    claims = {"sub": sub, "iat": now, "exp": now + expires_in}
    if email:
        claims["email"] = email
    if settings.JWT_AUDIENCE:
        claims["aud"] = settings.JWT_AUDIENCE
    if settings.JWT_ISSUER:
        claims["iss"] = settings.JWT_ISSUER
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenData:
    """
    Validate a token and return its claims.

    Raises:
        HTTPException: 401 if the token is expired or invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected invalid token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    email = payload.get("email")
    return TokenData(
        sub=str(payload["sub"]),
        email=email.lower() if email else None,
        username=payload.get("preferred_username") or payload.get("username"),
    )


async def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenData:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return decode_access_token(credentials.credentials)
