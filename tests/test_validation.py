"""Tests for submission pre-flight checks"""

import pytest

from soapbox_portal.services.errors import ValidationFailed
from soapbox_portal.services.schemas import (
    DesignFile,
    MemberInput,
    RegistrationForm,
    valid_members,
)
from soapbox_portal.services.validation import (
    MAX_FILE_BYTES,
    MAX_TEXT_LENGTH,
    validate_file,
    validate_submission,
)

MEMBERS = [MemberInput(name="Alice", age=30)]


def _form(**overrides):
    values = {
        "team_name": "Rocket",
        "captain_name": "Alice",
        "email": "alice@example.com",
        "phone_number": "07700 900123",
        "soapbox_name": "The Comet",
        "design_description": "Plywood",
        "dimensions": "2m x 1m",
        "brakes_steering": "Rope and friction brake",
        "terms_accepted": True,
    }
    values.update(overrides)
    return RegistrationForm(**values)


def test_valid_submission_passes():
    validate_submission(_form(), MEMBERS)


def test_age_range_is_optional():
    validate_submission(_form(age_range=""), MEMBERS)


def test_terms_checked_first():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_submission(_form(terms_accepted=False, team_name=""), [])

    assert exc_info.value.field == "terms_accepted"
    assert exc_info.value.step == "validation"
    assert exc_info.value.retryable is False


@pytest.mark.parametrize(
    "field",
    [
        "team_name",
        "captain_name",
        "email",
        "phone_number",
        "soapbox_name",
        "design_description",
        "dimensions",
        "brakes_steering",
    ],
)
def test_required_field_missing(field):
    with pytest.raises(ValidationFailed) as exc_info:
        validate_submission(_form(**{field: "  "}), MEMBERS)

    assert exc_info.value.field == field
    assert "required" in exc_info.value.reason


def test_overlong_text_rejected():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_submission(
            _form(design_description="x" * (MAX_TEXT_LENGTH + 1)), MEMBERS
        )

    assert exc_info.value.field == "design_description"


def test_email_needs_at_sign():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_submission(_form(email="alice.example.com"), MEMBERS)

    assert exc_info.value.field == "email"


@pytest.mark.parametrize(
    "members",
    [
        [],
        [MemberInput(name="", age=10)],
        [MemberInput(name="Bob", age=0)],
        [MemberInput(name="   ", age=-3)],
    ],
)
def test_needs_one_valid_member(members):
    with pytest.raises(ValidationFailed) as exc_info:
        validate_submission(_form(), members)

    assert exc_info.value.field == "members"


def test_one_valid_member_among_blanks_is_enough():
    validate_submission(_form(), [MemberInput(), MemberInput(name="Bob", age=9)])


def test_valid_members_keeps_order_and_trims():
    members = [
        MemberInput(name=" Bob ", age=9),
        MemberInput(name="", age=4),
        MemberInput(name="Alice", age=30),
    ]

    assert valid_members(members) == [
        MemberInput(name="Bob", age=9),
        MemberInput(name="Alice", age=30),
    ]


class TestDesignFile:
    @pytest.mark.parametrize(
        "content_type", ["application/pdf", "image/jpeg", "image/png"]
    )
    def test_allowed_types(self, content_type):
        validate_file(DesignFile("plan", content_type, b"data"))

    def test_wrong_type(self):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_file(DesignFile("plan.docx", "application/msword", b"data"))

        assert exc_info.value.field == "design_file"
        assert "Invalid file type" in exc_info.value.reason

    def test_empty_file(self):
        with pytest.raises(ValidationFailed, match="empty"):
            validate_file(DesignFile("plan.png", "image/png", b""))

    def test_size_limit_is_inclusive(self):
        validate_file(DesignFile("plan.png", "image/png", b"x" * MAX_FILE_BYTES))

        with pytest.raises(ValidationFailed, match="too large"):
            validate_file(
                DesignFile("plan.png", "image/png", b"x" * (MAX_FILE_BYTES + 1))
            )

    def test_file_checked_within_submission(self):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_submission(
                _form(), MEMBERS, DesignFile("plan.gif", "image/gif", b"GIF")
            )

        assert exc_info.value.field == "design_file"

    @pytest.mark.parametrize(
        "filename, content_type, extension",
        [
            ("Plan.PNG", "image/png", "png"),
            ("scan", "image/jpeg", "jpg"),
            ("drawing", "application/pdf", "pdf"),
        ],
    )
    def test_extension(self, filename, content_type, extension):
        assert DesignFile(filename, content_type, b"1").extension == extension
