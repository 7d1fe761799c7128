"""Team registration endpoints for authenticated owners"""

import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError
from sqlmodel import Session
from starlette.datastructures import UploadFile

from soapbox_portal.auth.dependencies import get_current_user
from soapbox_portal.auth.models import User
from soapbox_portal.models.database import get_db
from soapbox_portal.routers.responses import (
    RegistrationResponse,
    SubmissionResponse,
    http_error_for,
)
from soapbox_portal.services.errors import RegistrationError, ValidationFailed
from soapbox_portal.services.interfaces import BlobStore, Notifier
from soapbox_portal.services.providers import get_blob_store, get_notifier
from soapbox_portal.services.registration_repository import RegistrationRepository
from soapbox_portal.services.registration_service import RegistrationService
from soapbox_portal.services.schemas import (
    OWNER_FIELDS,
    DesignFile,
    MemberInput,
    RegistrationForm,
)
from soapbox_portal.services.validation import FILE_TOO_LARGE, MAX_FILE_BYTES

router = APIRouter(prefix="/api/registration", tags=["Registration"])

logger = logging.getLogger(__name__)

TRUTHY = {"true", "on", "1", "yes"}


def _parse_members(raw: Optional[str]) -> List[MemberInput]:
    """Members arrive as a JSON array of {"name", "age"} objects"""
    try:
        items = json.loads(raw or "[]")
        if not isinstance(items, list):
            raise ValueError("members must be a list")
        return [MemberInput(**item) for item in items]
    except (ValueError, TypeError, ValidationError) as e:
        raise ValidationFailed("members", f"Invalid team member data: {e}")


async def _read_design_file(upload) -> Optional[DesignFile]:
    # Browsers send an empty part when no file was chosen
    if not isinstance(upload, UploadFile) or not upload.filename:
        return None
    if upload.size is not None and upload.size > MAX_FILE_BYTES:
        raise ValidationFailed("design_file", FILE_TOO_LARGE)
    # Never buffer more than one byte past the limit
    data = await upload.read(MAX_FILE_BYTES + 1)
    if len(data) > MAX_FILE_BYTES:
        raise ValidationFailed("design_file", FILE_TOO_LARGE)
    return DesignFile(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        data=data,
    )


@router.post("", response_model=SubmissionResponse)
async def submit_registration(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    blob_store: Optional[BlobStore] = Depends(get_blob_store),
    notifier: Notifier = Depends(get_notifier),
):
    """Create or update the caller's team registration (multipart form)"""
    form_data = await request.form()

    values = {name: str(form_data.get(name) or "").strip() for name in OWNER_FIELDS}
    # The team contact defaults to the signed-in account's email
    if not values["email"] and user.email:
        values["email"] = user.email
    terms = str(form_data.get("terms_accepted") or "").lower() in TRUTHY
    form = RegistrationForm(**values, terms_accepted=terms)

    service = RegistrationService(RegistrationRepository(db), blob_store, notifier)

    try:
        members = _parse_members(form_data.get("members"))
        design_file = await _read_design_file(form_data.get("design_file"))
        result = await service.submit(user.user_id, form, members, design_file)
    except RegistrationError as e:
        logger.info(f"Registration submission for {user.user_id} failed at {e.step}: {e}")
        raise http_error_for(e)

    message = (
        "Your team has been registered successfully!"
        if result.created
        else "Your team registration has been updated successfully!"
    )
    if result.notification_failed:
        message += " We could not send the confirmation email."

    return SubmissionResponse(
        message=message,
        created=result.created,
        notification_failed=result.notification_failed,
        registration=RegistrationResponse.build(result.registration, result.members),
    )


@router.get("", response_model=RegistrationResponse)
async def get_my_registration(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Return the caller's registration so the form can be prefilled"""
    repository = RegistrationRepository(db)
    try:
        registration = repository.fetch_by_owner(user.user_id)
        if registration is None:
            raise HTTPException(status_code=404, detail="No registration yet")
        members = repository.list_members(registration.id)
    except RegistrationError as e:
        raise http_error_for(e)

    return RegistrationResponse.build(registration, members)
