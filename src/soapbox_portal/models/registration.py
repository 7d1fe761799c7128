"""SQLModel team registration models"""

import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, Column, DateTime, Index
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Uuid
from sqlmodel import Field, SQLModel


class RegistrationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TeamRegistration(SQLModel, table=True):
    """One team registration per owner (the authenticated submitter).

    `status` and `checked_in_at` belong to the organisers and are never
    written by an owner save.
    """

    __tablename__ = "team_registrations"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    owner_id: str = Field(unique=True, index=True)  # Auth0 user ID as string

    team_name: str
    captain_name: str
    email: str
    phone_number: str
    age_range: str = Field(default="")
    soapbox_name: str
    design_description: str
    dimensions: str
    brakes_steering: str

    participants_count: int = Field(default=0)
    file_ref: Optional[str] = Field(default=None)
    terms_accepted: bool = Field(default=False)

    status: RegistrationStatus = Field(
        default=RegistrationStatus.PENDING,
        sa_column=Column(
            SAEnum(
                RegistrationStatus,
                name="registration_status",
                native_enum=True,
                values_callable=lambda enum: [e.value for e in enum],
            ),
            nullable=False,
            index=True,
            server_default=RegistrationStatus.PENDING.value,
        ),
    )
    checked_in_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )

    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    __table_args__ = (
        CheckConstraint(
            "participants_count >= 0", name="ck_team_registrations_participants_ge_0"
        ),
    )


class TeamMember(SQLModel, table=True):
    """Member of a team, kept in submission order via `position`"""

    __tablename__ = "team_members"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    registration_id: uuid.UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("team_registrations.id", ondelete="CASCADE"),
            nullable=False,
        )
    )
    position: int = Field(default=0)
    name: str
    age: int
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    __table_args__ = (
        CheckConstraint("age > 0", name="ck_team_members_age_gt_0"),
        Index("idx_team_members_registration_position", "registration_id", "position"),
    )
