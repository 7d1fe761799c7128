"""Registration repository: durable team records and their members.

- One registration per owner, enforced by a unique index on owner_id
- Owner saves replace the member list in the same transaction as the
  parent update, so readers never see a half-replaced team
- Owner saves never touch status or check-in; only the admin operations do
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlmodel import Session, select

from soapbox_portal.models.registration import (
    RegistrationStatus,
    TeamMember,
    TeamRegistration,
)
from soapbox_portal.services.errors import (
    ConflictingRegistration,
    PersistenceFailed,
    RegistrationNotFound,
    StorageUnavailable,
    ValidationFailed,
)
from soapbox_portal.services.schemas import OWNER_FIELDS, MemberInput

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("team_name", "captain_name", "created_at", "updated_at", "status")


@dataclass
class RegistrationFilter:
    """Admin list filter; `search` matches team, captain and email"""

    search: Optional[str] = None
    status: Optional[RegistrationStatus] = None
    checked_in: Optional[bool] = None
    limit: Optional[int] = None
    offset: int = 0


@dataclass
class RegistrationSort:
    field: str = "created_at"
    direction: str = "desc"

    def __post_init__(self):
        if self.field not in SORTABLE_FIELDS:
            raise ValueError(
                f"Cannot sort by '{self.field}', expected one of {list(SORTABLE_FIELDS)}"
            )
        if self.direction not in ("asc", "desc"):
            raise ValueError("direction must be 'asc' or 'desc'")


class RegistrationRepository:
    """Data access for team registrations"""

    def __init__(self, db_session: Session):
        self.db = db_session

    # Reads
    def fetch_by_owner(self, owner_id: str) -> Optional[TeamRegistration]:
        """Return the owner's registration, or None"""
        try:
            stmt = select(TeamRegistration).where(TeamRegistration.owner_id == owner_id)
            return self.db.exec(stmt).first()
        except OperationalError as e:
            raise StorageUnavailable(e) from e

    def get(self, registration_id: uuid.UUID) -> Optional[TeamRegistration]:
        try:
            return self.db.get(TeamRegistration, registration_id)
        except OperationalError as e:
            raise StorageUnavailable(e) from e

    def list_members(self, registration_id: uuid.UUID) -> List[TeamMember]:
        """Members in submission order"""
        stmt = (
            select(TeamMember)
            .where(TeamMember.registration_id == registration_id)
            .order_by(TeamMember.position.asc())
        )
        try:
            return list(self.db.exec(stmt).all())
        except OperationalError as e:
            raise StorageUnavailable(e) from e

    def _apply_filter(self, stmt, registration_filter: RegistrationFilter):
        if registration_filter.status is not None:
            stmt = stmt.where(TeamRegistration.status == registration_filter.status)
        if registration_filter.checked_in is True:
            stmt = stmt.where(TeamRegistration.checked_in_at.is_not(None))
        elif registration_filter.checked_in is False:
            stmt = stmt.where(TeamRegistration.checked_in_at.is_(None))
        search = (registration_filter.search or "").strip().lower()
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    func.lower(TeamRegistration.team_name).like(pattern),
                    func.lower(TeamRegistration.captain_name).like(pattern),
                    func.lower(TeamRegistration.email).like(pattern),
                )
            )
        return stmt

    def list_all(
        self,
        registration_filter: Optional[RegistrationFilter] = None,
        sort: Optional[RegistrationSort] = None,
    ) -> List[TeamRegistration]:
        """Read-only snapshot of registrations for the organiser views"""
        registration_filter = registration_filter or RegistrationFilter()
        sort = sort or RegistrationSort()

        column = getattr(TeamRegistration, sort.field)
        order = column.asc() if sort.direction == "asc" else column.desc()

        stmt = self._apply_filter(select(TeamRegistration), registration_filter)
        # id as tie-breaker keeps pagination stable
        stmt = stmt.order_by(order, TeamRegistration.id.asc())
        if registration_filter.offset:
            stmt = stmt.offset(registration_filter.offset)
        if registration_filter.limit is not None:
            stmt = stmt.limit(registration_filter.limit)

        try:
            return list(self.db.exec(stmt).all())
        except OperationalError as e:
            raise StorageUnavailable(e) from e

    def count(self, registration_filter: Optional[RegistrationFilter] = None) -> int:
        registration_filter = registration_filter or RegistrationFilter()
        stmt = self._apply_filter(
            select(func.count(TeamRegistration.id)), registration_filter
        )
        try:
            return self.db.exec(stmt).one()
        except OperationalError as e:
            raise StorageUnavailable(e) from e

    def status_counts(self) -> Dict[RegistrationStatus, int]:
        """Number of registrations per status, zero-filled"""
        stmt = select(TeamRegistration.status, func.count(TeamRegistration.id)).group_by(
            TeamRegistration.status
        )
        try:
            rows = self.db.exec(stmt).all()
        except OperationalError as e:
            raise StorageUnavailable(e) from e

        counts = {s: 0 for s in RegistrationStatus}
        for status, total in rows:
            counts[RegistrationStatus(status)] = total
        return counts

    # Owner write-path
    def _lock_by_owner(self, owner_id: str) -> Optional[TeamRegistration]:
        """Fetch the owner's row with a row lock (ignored by SQLite)"""
        stmt = (
            select(TeamRegistration)
            .where(TeamRegistration.owner_id == owner_id)
            .with_for_update()
        )
        return self.db.exec(stmt).first()

    def upsert(
        self,
        owner_id: str,
        fields: Dict[str, str],
        members: List[MemberInput],
        file_ref: Optional[str] = None,
        now: Optional[datetime] = None,
        terms_accepted: bool = True,
    ) -> TeamRegistration:
        """Create the owner's registration or update it in place.

        - Creation sets status=pending and created_at
        - Update rewrites owner fields only; status, created_at and
          checked_in_at are left as stored
        - file_ref=None keeps the stored reference
        - A save without accepted terms is refused before touching the database
        - Members are replaced wholesale; parent and members commit together

        Raises:
            ValidationFailed: terms_accepted is False
            ConflictingRegistration: a concurrent request created the row first
            StorageUnavailable: the database could not be reached
            PersistenceFailed: any other database failure
        """
        if not terms_accepted:
            raise ValidationFailed(
                "terms_accepted", "Please accept the terms and conditions."
            )

        now = now or datetime.now(timezone.utc)
        owner_values = {name: fields.get(name, "") for name in OWNER_FIELDS}
        creating = False

        try:
            registration = self._lock_by_owner(owner_id)

            if registration is None:
                creating = True
                registration = TeamRegistration(
                    owner_id=owner_id,
                    status=RegistrationStatus.PENDING,
                    created_at=now,
                    **owner_values,
                )
            else:
                for name, value in owner_values.items():
                    setattr(registration, name, value)
                for old_member in self.db.exec(
                    select(TeamMember).where(
                        TeamMember.registration_id == registration.id
                    )
                ).all():
                    self.db.delete(old_member)

            if file_ref is not None:
                registration.file_ref = file_ref
            registration.terms_accepted = terms_accepted
            registration.participants_count = len(members)
            registration.updated_at = now

            self.db.add(registration)
            # Deletes must reach the database before re-inserting positions
            self.db.flush()

            self.db.add_all(
                TeamMember(
                    registration_id=registration.id,
                    position=position,
                    name=member.name,
                    age=member.age,
                    created_at=now,
                )
                for position, member in enumerate(members)
            )
            self.db.commit()

        except IntegrityError as e:
            self.db.rollback()
            if creating and self.fetch_by_owner(owner_id) is not None:
                logger.info(f"Concurrent first submission detected for owner {owner_id}")
                raise ConflictingRegistration(owner_id, e) from e
            logger.error(f"Integrity error saving registration for {owner_id}: {e}")
            raise PersistenceFailed(e) from e
        except OperationalError as e:
            self.db.rollback()
            logger.error(f"Database unavailable saving registration for {owner_id}: {e}")
            raise StorageUnavailable(e) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving registration for {owner_id}: {e}")
            raise PersistenceFailed(e) from e

        self.db.refresh(registration)
        logger.info(
            f"{'Created' if creating else 'Updated'} registration {registration.id} "
            f"for owner {owner_id} with {len(members)} members"
        )
        return registration

    # Organiser operations
    def _update_admin_field(
        self, registration_id: uuid.UUID, **values
    ) -> TeamRegistration:
        try:
            registration = self.db.get(TeamRegistration, registration_id)
            if registration is None:
                raise RegistrationNotFound(registration_id)

            for name, value in values.items():
                setattr(registration, name, value)

            self.db.add(registration)
            self.db.commit()
            self.db.refresh(registration)
            return registration

        except OperationalError as e:
            self.db.rollback()
            raise StorageUnavailable(e) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailed(e) from e

    def set_status(
        self,
        registration_id: uuid.UUID,
        status: RegistrationStatus,
        now: Optional[datetime] = None,
    ) -> TeamRegistration:
        """Admin-only status change; other fields and members are untouched"""
        registration = self._update_admin_field(
            registration_id,
            status=RegistrationStatus(status),
            updated_at=now or datetime.now(timezone.utc),
        )
        logger.info(f"Registration {registration_id} status set to {registration.status.value}")
        return registration

    def check_in(
        self, registration_id: uuid.UUID, now: Optional[datetime] = None
    ) -> TeamRegistration:
        """Mark a team as arrived on event day; the first check-in time wins"""
        existing = self.get(registration_id)
        if existing is None:
            raise RegistrationNotFound(registration_id)
        if existing.checked_in_at is not None:
            return existing

        now = now or datetime.now(timezone.utc)
        registration = self._update_admin_field(
            registration_id, checked_in_at=now, updated_at=now
        )
        logger.info(f"Registration {registration_id} checked in")
        return registration
