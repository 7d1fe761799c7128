"""Authentication models for FastAPI"""

from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """Authenticated team owner resolved from an Auth0 access token"""

    user_id: str
    email: Optional[str] = None
    claims: dict = {}
