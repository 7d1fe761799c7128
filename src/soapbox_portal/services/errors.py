"""Errors raised by the registration write-path.

Every error carries the `step` that failed so callers can tell the user
whether to fix a field, pick another file, or simply try again.
"""

from typing import Optional


class RegistrationError(Exception):
    """Base class for registration failures"""

    step = "save"
    retryable = False

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ValidationFailed(RegistrationError):
    """Input rejected before any side effect took place"""

    step = "validation"

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class FileUploadFailed(RegistrationError):
    """The design file could not be stored; nothing was saved"""

    step = "file"
    retryable = True

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__("Design file upload failed", cause)


class PersistenceFailed(RegistrationError):
    """The registration could not be saved"""

    step = "save"
    retryable = True

    def __init__(
        self,
        cause: Optional[BaseException] = None,
        message: str = "Registration could not be saved",
    ):
        super().__init__(message, cause)


class StorageUnavailable(PersistenceFailed):
    """The database could not be reached; retry with backoff"""

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__(cause, "Registration storage is temporarily unavailable")


class ConflictingRegistration(RegistrationError):
    """Another request created this owner's registration first.

    Internal signal: the service retries once as an update.
    """

    def __init__(self, owner_id: str, cause: Optional[BaseException] = None):
        super().__init__(f"Registration for owner {owner_id} already exists", cause)
        self.owner_id = owner_id


class RegistrationNotFound(RegistrationError):
    def __init__(self, registration_id):
        super().__init__(f"Registration {registration_id} not found")
        self.registration_id = registration_id
