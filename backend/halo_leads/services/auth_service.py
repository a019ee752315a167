"""
Authentication service: bearer token issuing and verification.

Contractors sign in with the identity provider; this service only has to turn
a token into the contractor uid that owns campaigns.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ..config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


class AuthService:
    """Service for token operations."""

    def __init__(self):
        """Initialize auth service with settings."""
        self.secret_key = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.access_token_expire_minutes = settings.access_token_expire_minutes

    def create_access_token(self, uid: str, email: Optional[str] = None) -> str:
        """Create a new access token for a contractor."""
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.access_token_expire_minutes)
        to_encode = {
            "sub": uid,
            "email": email,
            "exp": expire,
            "type": "access"
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Optional[dict]:
        """
        Decode and validate a JWT token.

        Returns:
            Decoded token payload or None if invalid
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
            return payload
        except JWTError as e:
            logger.warning(f"Token decode error: {e}")
            return None

    def verify(self, token: str) -> Optional[str]:
        """Return the contractor uid for a valid access token, else None."""
        payload = self.decode_token(token)
        if not payload or payload.get("type") != "access":
            return None
        return payload.get("sub")


# Singleton instance
_auth_service = None


def get_auth_service() -> AuthService:
    """Get the singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
