"""Registration service for handling team submissions"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from soapbox_portal.models.registration import TeamMember, TeamRegistration
from soapbox_portal.services.errors import (
    ConflictingRegistration,
    FileUploadFailed,
    PersistenceFailed,
    RegistrationError,
    ValidationFailed,
)
from soapbox_portal.services.interfaces import BlobStore, Notifier
from soapbox_portal.services.registration_repository import RegistrationRepository
from soapbox_portal.services.schemas import (
    DesignFile,
    MemberInput,
    RegistrationForm,
    valid_members,
)
from soapbox_portal.services.validation import validate_submission

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    registration: TeamRegistration
    members: List[TeamMember]
    created: bool
    notification_failed: bool


class RegistrationService:
    """Create-or-update a team registration for its owner.

    A submission runs validate -> resolve -> attach file -> persist -> notify.
    Only the save must succeed: a failed upload aborts before anything is
    written, a failed save after an upload leaves the blob orphaned, and a
    failed notification is reported on the result instead of raised.
    """

    def __init__(
        self,
        repository: RegistrationRepository,
        blob_store: Optional[BlobStore],
        notifier: Notifier,
    ):
        self.repository = repository
        self.blob_store = blob_store
        self.notifier = notifier

    async def submit(
        self,
        owner_id: str,
        form: RegistrationForm,
        members: List[MemberInput],
        file: Optional[DesignFile] = None,
        now: Optional[datetime] = None,
    ) -> SubmissionResult:
        """
        Save the owner's registration, creating it on first submission.

        Args:
            owner_id: Authenticated submitter, resolved by the caller's session layer
            form: Descriptive team fields and terms acceptance
            members: Team members in display order; blank rows are dropped
            file: Optional design file
            now: Timestamp override for the save

        Returns:
            SubmissionResult with the saved registration and its members

        Raises:
            ValidationFailed: Bad input, nothing was touched
            FileUploadFailed: Upload failed, nothing was saved
            PersistenceFailed: Save failed (StorageUnavailable when transient)
        """
        validate_submission(form, members, file)
        members = valid_members(members)
        now = now or datetime.now(timezone.utc)

        existing = self.repository.fetch_by_owner(owner_id)
        created = existing is None

        file_ref = None
        if file is not None:
            file_ref = await self._attach_file(owner_id, file, now)

        registration, raced = self._persist(owner_id, form, members, file_ref, now)
        # Losing a first-submission race turns this save into an update
        created = created and not raced
        saved_members = self.repository.list_members(registration.id)

        notification_failed = not await self._notify(registration, saved_members)

        return SubmissionResult(
            registration=registration,
            members=saved_members,
            created=created,
            notification_failed=notification_failed,
        )

    async def _attach_file(self, owner_id: str, file: DesignFile, now: datetime) -> str:
        if self.blob_store is None:
            raise FileUploadFailed(RuntimeError("File storage is not configured"))

        path = f"{owner_id}/{int(now.timestamp() * 1000)}.{file.extension}"
        try:
            return await self.blob_store.put(path, file)
        except Exception as e:
            logger.error(f"Design file upload failed for owner {owner_id}: {e}")
            raise FileUploadFailed(e) from e

    def _persist(
        self,
        owner_id: str,
        form: RegistrationForm,
        members: List[MemberInput],
        file_ref: Optional[str],
        now: datetime,
    ) -> Tuple[TeamRegistration, bool]:
        """Save through the repository; the flag is True when a creation race was lost"""
        fields = form.owner_fields()
        try:
            try:
                registration = self.repository.upsert(
                    owner_id,
                    fields,
                    members,
                    file_ref,
                    now,
                    terms_accepted=form.terms_accepted,
                )
                return registration, False
            except ConflictingRegistration:
                # Lost a first-submission race; the row exists now, save as an update
                logger.info(f"Retrying registration save for {owner_id} as an update")
                registration = self.repository.upsert(
                    owner_id,
                    fields,
                    members,
                    file_ref,
                    now,
                    terms_accepted=form.terms_accepted,
                )
                return registration, True
        except (PersistenceFailed, ValidationFailed):
            self._log_orphan(owner_id, file_ref)
            raise
        except RegistrationError as e:
            self._log_orphan(owner_id, file_ref)
            raise PersistenceFailed(e) from e

    def _log_orphan(self, owner_id: str, file_ref: Optional[str]) -> None:
        if file_ref:
            logger.warning(
                f"Registration save failed for {owner_id}; uploaded file {file_ref} is orphaned"
            )

    async def _notify(
        self, registration: TeamRegistration, members: List[TeamMember]
    ) -> bool:
        try:
            sent = await self.notifier.send(registration, members)
        except Exception as e:
            logger.warning(f"Notification for registration {registration.id} failed: {e}")
            return False

        if not sent:
            logger.warning(f"Notification for registration {registration.id} was not sent")
        return bool(sent)
