"""
Security utilities for authentication and authorization.

Sign-in happens at an external identity provider; this service only verifies
the bearer JWT it issues and maps the token subject to a local user.

This provides:
1. JWT validation for identity-provider tokens
2. Security dependencies for FastAPI
3. Role-based access control
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from fitsocial.config import settings
from fitsocial.core.exceptions import AuthenticationError

# JWT token scheme
security = HTTPBearer()


class SecurityManager:
    """Verifies identity-provider tokens and extracts the caller's identity."""

    def __init__(self):
        self.secret_key = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.audience = settings.jwt_audience
        self.issuer = settings.jwt_issuer

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a JWT token.

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        options = {"verify_aud": self.audience is not None}
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options=options,
            )
        except JWTError as e:
            raise AuthenticationError(f"Could not validate token: {str(e)}")

    def extract_identity(self, token: str) -> Dict[str, Any]:
        """
        Extract the caller identity from a token.

        Returns:
            {"external_id", "email", "name", "avatar_url", "role"}

        Raises:
            AuthenticationError: If the token carries no subject
        """
        payload = self.decode_token(token)

        external_id = payload.get("sub")
        if not external_id:
            raise AuthenticationError("Token does not contain a subject")

        return {
            "external_id": str(external_id),
            "email": payload.get("email"),
            "name": payload.get("name"),
            "avatar_url": payload.get("picture"),
            "role": payload.get("role", "user"),
        }

    def create_access_token(
        self,
        external_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
        role: str = "user",
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Issue a token shaped like the identity provider's.

        Only used for local runs and tests where no provider is available.
        """
        now = datetime.now(timezone.utc)
        to_encode: Dict[str, Any] = {
            "sub": external_id,
            "email": email,
            "name": name,
            "role": role,
            "iat": now,
            "exp": now + (expires_delta or timedelta(hours=1)),
        }
        if self.audience:
            to_encode["aud"] = self.audience
        if self.issuer:
            to_encode["iss"] = self.issuer

        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)


# Global security manager instance
security_manager = SecurityManager()


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Dict[str, Any]:
    """
    FastAPI dependency returning the verified token identity.

    Raises:
        HTTPException: 401 if authentication fails
    """
    try:
        return security_manager.extract_identity(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


class RoleChecker:
    """
    Role-based access control checker.

    @router.post("/reconcile", dependencies=[Depends(require_admin)])
    """

    def __init__(self, allowed_roles: list[str]):
        self.allowed_roles = allowed_roles

    def __call__(self, identity: Dict[str, Any] = Depends(get_current_identity)):
        if identity.get("role", "user") not in self.allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {', '.join(self.allowed_roles)}",
            )
        return identity


require_admin = RoleChecker(["admin"])
