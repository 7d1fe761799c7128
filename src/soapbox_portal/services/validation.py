"""Pre-flight checks for team submissions. No side effects."""

from typing import List, Optional

from soapbox_portal.services.errors import ValidationFailed
from soapbox_portal.services.schemas import (
    REQUIRED_FIELDS,
    DesignFile,
    MemberInput,
    RegistrationForm,
)

ALLOWED_FILE_TYPES = frozenset({"application/pdf", "image/jpeg", "image/png"})
MAX_FILE_BYTES = 10 * 1024 * 1024
MAX_TEXT_LENGTH = 2000
FILE_TOO_LARGE = "File too large. Please upload a file smaller than 10MB."


def _label(field: str) -> str:
    return field.replace("_", " ").capitalize()


def validate_file(file: DesignFile) -> None:
    if file.content_type not in ALLOWED_FILE_TYPES:
        raise ValidationFailed(
            "design_file", "Invalid file type. Please upload a JPG, PNG, or PDF file."
        )
    if file.size == 0:
        raise ValidationFailed("design_file", "File is empty")
    if file.size > MAX_FILE_BYTES:
        raise ValidationFailed("design_file", FILE_TOO_LARGE)


def validate_submission(
    form: RegistrationForm,
    members: List[MemberInput],
    file: Optional[DesignFile] = None,
) -> None:
    """
    Raise ValidationFailed for the first problem found.

    Checks terms acceptance, mandatory fields, at least one member with a
    name and a positive age, and the design file's type and size.
    """
    if not form.terms_accepted:
        raise ValidationFailed(
            "terms_accepted", "Please accept the terms and conditions."
        )

    for field in REQUIRED_FIELDS:
        value = getattr(form, field).strip()
        if not value:
            raise ValidationFailed(field, f"{_label(field)} is required")
        if len(value) > MAX_TEXT_LENGTH:
            raise ValidationFailed(
                field, f"{_label(field)} must be at most {MAX_TEXT_LENGTH} characters"
            )

    if "@" not in form.email:
        raise ValidationFailed("email", "Please provide a valid email address")

    if not any(member.is_valid() for member in members):
        raise ValidationFailed(
            "members", "Please add at least one team member with a name and age."
        )

    if file is not None:
        validate_file(file)
