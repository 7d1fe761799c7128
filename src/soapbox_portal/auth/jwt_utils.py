"""JWT utilities for authentication using authlib"""

from typing import Dict, Optional

import httpx
from aiocache import Cache, cached
from authlib.jose import JoseError, JsonWebToken
from authlib.jose.errors import InvalidTokenError

from soapbox_portal.auth.models import User
from soapbox_portal.config import config
from soapbox_portal.logging_config import get_logger

logger = get_logger(__name__)


class JWTUtils:
    """Auth0 access token verification with JWKS caching.

    Implements the AuthProvider capability.
    """

    def __init__(self, auth0_domain: Optional[str] = None, audience: Optional[str] = None):
        self.jwt = JsonWebToken(["RS256"])
        self.auth0_domain = auth0_domain or config.get("auth0_domain")
        self.audience = audience or config.get("auth0_audience")

        if not self.auth0_domain:
            raise ValueError("AUTH0_DOMAIN must be configured")

        self.jwks_url = f"https://{self.auth0_domain}/.well-known/jwks.json"
        self.expected_issuer = f"https://{self.auth0_domain}/"

    @cached(ttl=3600, cache=Cache.MEMORY)
    async def _fetch_jwks(self) -> Dict:
        """Fetch JWKS from the Auth0 well-known endpoint (cached for an hour)"""
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(self.jwks_url, timeout=10.0)
                response.raise_for_status()
                logger.info(f"Fetched JWKS from {self.jwks_url}")
                return response.json()

        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch JWKS from {self.jwks_url}: {e}")
            raise InvalidTokenError(f"Unable to fetch JWKS: {e}")

    def _check_audience(self, claims: Dict) -> None:
        if not self.audience:
            return
        aud = claims.get("aud")
        audiences = aud if isinstance(aud, list) else [aud]
        if self.audience not in audiences:
            raise InvalidTokenError(f"Invalid audience: {aud}")

    async def _verify_auth0_token(self, token: str) -> Dict:
        """
        Verify and decode an Auth0 JWT token using cached JWKS

        Raises:
            InvalidTokenError: If token is invalid, expired or for another tenant
        """
        jwks = await self._fetch_jwks()

        try:
            claims = self.jwt.decode(token, jwks)
            claims.validate()
        except JoseError as e:
            logger.warning(f"JWT validation failed: {e}")
            raise InvalidTokenError(f"Token validation failed: {e}")

        if claims.get("iss") != self.expected_issuer:
            raise InvalidTokenError(
                f"Invalid issuer. Expected: {self.expected_issuer}, Got: {claims.get('iss')}"
            )
        self._check_audience(claims)
        return claims

    async def extract_user(self, token: str) -> User:
        """
        Extract the owner identity from an Auth0 JWT token

        Raises:
            InvalidTokenError: If token is invalid or missing the subject
        """
        claims = await self._verify_auth0_token(token)
        user_id = claims.get("sub")

        if not user_id:
            raise InvalidTokenError("Token missing 'sub' claim")

        return User(
            user_id=user_id,
            email=claims.get("email"),
            claims={
                "iss": claims.get("iss"),
                "aud": claims.get("aud"),
                "exp": claims.get("exp"),
                "iat": claims.get("iat"),
                "scope": claims.get("scope"),
            },
        )
