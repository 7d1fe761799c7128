"""Input shapes for the registration write-path"""

from dataclasses import dataclass
from pathlib import PurePath
from typing import Dict, List

from pydantic import BaseModel, Field

# Fields an owner may set on their registration. `status`, `checked_in_at`
# and the timestamps are set by the repository or by organisers.
OWNER_FIELDS = (
    "team_name",
    "captain_name",
    "email",
    "phone_number",
    "age_range",
    "soapbox_name",
    "design_description",
    "dimensions",
    "brakes_steering",
)

REQUIRED_FIELDS = tuple(f for f in OWNER_FIELDS if f != "age_range")


class RegistrationForm(BaseModel):
    """Descriptive fields submitted by a team owner"""

    team_name: str = ""
    captain_name: str = ""
    email: str = ""
    phone_number: str = ""
    age_range: str = ""
    soapbox_name: str = ""
    design_description: str = ""
    dimensions: str = ""
    brakes_steering: str = ""
    terms_accepted: bool = False

    def owner_fields(self) -> Dict[str, str]:
        """Trimmed owner-mutable values, ready for persistence"""
        return {name: getattr(self, name).strip() for name in OWNER_FIELDS}


class MemberInput(BaseModel):
    name: str = ""
    age: int = Field(default=0)

    def is_valid(self) -> bool:
        return bool(self.name.strip()) and self.age > 0


def valid_members(members: List[MemberInput]) -> List[MemberInput]:
    """Drop blank rows, keeping the submitted order"""
    return [
        MemberInput(name=m.name.strip(), age=m.age) for m in members if m.is_valid()
    ]


@dataclass
class DesignFile:
    """An uploaded design file with its client-declared MIME type"""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        suffix = PurePath(self.filename).suffix.lstrip(".").lower()
        return suffix or EXTENSIONS_BY_TYPE.get(self.content_type, "bin")


EXTENSIONS_BY_TYPE = {
    "application/pdf": "pdf",
    "image/jpeg": "jpg",
    "image/png": "png",
}
