"""Database models for Soapbox Portal"""

from soapbox_portal.models.registration import (
    RegistrationStatus,
    TeamMember,
    TeamRegistration,
)

__all__ = [
    "RegistrationStatus",
    "TeamRegistration",
    "TeamMember",
]
