"""Create team registrations and members

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-02-14 10:12:41.512906

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

status_enum = sa.Enum("pending", "approved", "rejected", name="registration_status")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "team_registrations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.VARCHAR(), nullable=False),
        sa.Column("team_name", sa.VARCHAR(), nullable=False),
        sa.Column("captain_name", sa.VARCHAR(), nullable=False),
        sa.Column("email", sa.VARCHAR(), nullable=False),
        sa.Column("phone_number", sa.VARCHAR(), nullable=False),
        sa.Column("age_range", sa.VARCHAR(), nullable=False),
        sa.Column("soapbox_name", sa.VARCHAR(), nullable=False),
        sa.Column("design_description", sa.VARCHAR(), nullable=False),
        sa.Column("dimensions", sa.VARCHAR(), nullable=False),
        sa.Column("brakes_steering", sa.VARCHAR(), nullable=False),
        sa.Column("participants_count", sa.INTEGER(), nullable=False),
        sa.Column("file_ref", sa.VARCHAR(), nullable=True),
        sa.Column("terms_accepted", sa.BOOLEAN(), nullable=False),
        sa.Column("status", status_enum, nullable=False, server_default="pending"),
        sa.Column("checked_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "participants_count >= 0", name="ck_team_registrations_participants_ge_0"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_team_registrations_owner_id"),
        "team_registrations",
        ["owner_id"],
        unique=True,
    )
    op.create_index(
        op.f("ix_team_registrations_status"),
        "team_registrations",
        ["status"],
        unique=False,
    )

    op.create_table(
        "team_members",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("registration_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.INTEGER(), nullable=False),
        sa.Column("name", sa.VARCHAR(), nullable=False),
        sa.Column("age", sa.INTEGER(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("age > 0", name="ck_team_members_age_gt_0"),
        sa.ForeignKeyConstraint(
            ["registration_id"],
            ["team_registrations.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_team_members_registration_position",
        "team_members",
        ["registration_id", "position"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_team_members_registration_position", table_name="team_members")
    op.drop_table("team_members")
    op.drop_index(op.f("ix_team_registrations_status"), table_name="team_registrations")
    op.drop_index(op.f("ix_team_registrations_owner_id"), table_name="team_registrations")
    op.drop_table("team_registrations")
    status_enum.drop(op.get_bind(), checkfirst=True)
