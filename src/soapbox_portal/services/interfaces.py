"""Capabilities the registration core depends on.

Concrete implementations live in `auth.jwt_utils` (AuthProvider),
`backends.blob_client` (BlobStore) and `services.email_service` (Notifier);
tests substitute in-memory fakes.
"""

from typing import List, Protocol

from soapbox_portal.auth.models import User
from soapbox_portal.models.registration import TeamMember, TeamRegistration
from soapbox_portal.services.schemas import DesignFile


class AuthProvider(Protocol):
    async def extract_user(self, token: str) -> User:
        """Resolve a bearer token to the authenticated user"""
        ...


class BlobStore(Protocol):
    async def put(self, path: str, file: DesignFile) -> str:
        """Store the file under `path` and return an opaque reference to it"""
        ...


class Notifier(Protocol):
    async def send(
        self, registration: TeamRegistration, members: List[TeamMember]
    ) -> bool:
        """Announce a saved registration; False or an exception means not sent"""
        ...
