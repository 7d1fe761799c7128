"""Response models and error translation shared by the API routers"""

import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException, status
from pydantic import BaseModel, Field

from soapbox_portal.models.registration import (
    RegistrationStatus,
    TeamMember,
    TeamRegistration,
)
from soapbox_portal.services.errors import (
    FileUploadFailed,
    PersistenceFailed,
    RegistrationError,
    RegistrationNotFound,
    StorageUnavailable,
    ValidationFailed,
)


class MemberResponse(BaseModel):
    name: str
    age: int


class RegistrationResponse(BaseModel):
    id: uuid.UUID
    team_name: str
    captain_name: str
    email: str
    phone_number: str
    age_range: str
    soapbox_name: str
    design_description: str
    dimensions: str
    brakes_steering: str
    participants_count: int
    terms_accepted: bool
    file_ref: Optional[str] = None
    file_url: Optional[str] = Field(
        default=None, description="Short-lived download link, organiser views only"
    )
    status: RegistrationStatus
    checked_in_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    members: List[MemberResponse] = []

    @classmethod
    def build(
        cls,
        registration: TeamRegistration,
        members: List[TeamMember],
        file_url: Optional[str] = None,
    ) -> "RegistrationResponse":
        # getattr reloads attributes expired by a commit, model_dump would not
        data = {
            name: getattr(registration, name)
            for name in cls.model_fields
            if name not in ("file_url", "members")
        }
        return cls(
            **data,
            file_url=file_url,
            members=[MemberResponse(name=m.name, age=m.age) for m in members],
        )


class SubmissionResponse(BaseModel):
    success: bool = True
    message: str
    created: bool
    notification_failed: bool
    registration: RegistrationResponse


def http_error_for(error: RegistrationError) -> HTTPException:
    """Map a write-path error to an HTTP error naming the failed step"""
    if isinstance(error, ValidationFailed):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "step": error.step,
                "field": error.field,
                "reason": error.reason,
            },
        )
    if isinstance(error, FileUploadFailed):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "step": error.step,
                "message": "We couldn't upload your design file. "
                "Your registration was not saved, please try again.",
            },
        )
    if isinstance(error, RegistrationNotFound):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Registration not found"
        )
    if isinstance(error, StorageUnavailable):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "step": error.step,
                "message": "Registrations are temporarily unavailable, please try again shortly.",
            },
            headers={"Retry-After": "5"},
        )
    if isinstance(error, PersistenceFailed):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "step": error.step,
                "message": "We couldn't save your registration, please try again.",
            },
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"step": error.step, "message": error.message},
    )
