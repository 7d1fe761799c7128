"""Authentication dependencies for FastAPI"""

import secrets

from authlib.jose.errors import JoseError
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from soapbox_portal.auth.jwt_utils import JWTUtils
from soapbox_portal.auth.models import User
from soapbox_portal.config import config
from soapbox_portal.logging_config import get_logger
from soapbox_portal.services.interfaces import AuthProvider

# Create HTTPBearer security scheme
security = HTTPBearer(auto_error=False)

logger = get_logger(__name__)

_auth_provider = None


def get_auth_provider() -> AuthProvider:
    """Get or create the global Auth0 token verifier"""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = JWTUtils()
        logger.info("Initialized Auth0 token verifier")
    return _auth_provider


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    auth_provider: AuthProvider = Depends(get_auth_provider),
) -> User:
    """
    FastAPI dependency resolving the team owner from an Auth0 Bearer token

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return await auth_provider.extract_user(credentials.credentials)
    except JoseError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_admin(
    x_admin_key: str = Header(..., description="Admin API key for organiser routes"),
) -> None:
    """Guard organiser routes with the shared admin API key"""
    expected_key = config.get("admin_api_key")

    if not expected_key or not secrets.compare_digest(x_admin_key, expected_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin API key"
        )
