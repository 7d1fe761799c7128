from soapbox_portal.services.errors import (
    ConflictingRegistration,
    FileUploadFailed,
    PersistenceFailed,
    RegistrationError,
    RegistrationNotFound,
    StorageUnavailable,
    ValidationFailed,
)
from soapbox_portal.services.registration_repository import (
    RegistrationFilter,
    RegistrationRepository,
    RegistrationSort,
)
from soapbox_portal.services.registration_service import (
    RegistrationService,
    SubmissionResult,
)
from soapbox_portal.services.schemas import DesignFile, MemberInput, RegistrationForm

__all__ = [
    "ConflictingRegistration",
    "DesignFile",
    "FileUploadFailed",
    "MemberInput",
    "PersistenceFailed",
    "RegistrationError",
    "RegistrationFilter",
    "RegistrationForm",
    "RegistrationNotFound",
    "RegistrationRepository",
    "RegistrationService",
    "RegistrationSort",
    "StorageUnavailable",
    "SubmissionResult",
    "ValidationFailed",
]
