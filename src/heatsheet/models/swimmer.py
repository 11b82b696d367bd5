"""Roster swimmer model."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

# Spellings seen in roster uploads, mapped to the canonical code
GENDER_ALIASES: dict[str, str] = {
    "m": "M",
    "male": "M",
    "boy": "M",
    "boys": "M",
    "f": "F",
    "female": "F",
    "girl": "F",
    "girls": "F",
}


class Gender(StrEnum):
    """Swimmer gender for competition purposes."""

    MALE = "M"
    FEMALE = "F"


class RosterSwimmer(BaseModel):
    """A member of a team roster.

    Rosters are owned by team administration; the assignment engine only
    reads them and copies swimmers into lanes as SwimmerEntry values.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str
    first_name: str
    last_name: str
    age: int = 0
    gender: Gender | None = None
    team: str | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        return v.strip()

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, v: object) -> object:
        """Accept M/F, Male/Female and Boy/Girl spellings; blank means unknown."""
        if v is None or isinstance(v, Gender):
            return v
        text = str(v).strip().lower()
        if not text:
            return None
        if text not in GENDER_ALIASES:
            raise ValueError(f"Unknown gender: '{v}'")
        return GENDER_ALIASES[text]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def matches_name(self, first_name: str, last_name: str) -> bool:
        """Exact, case-insensitive name match."""
        return (
            self.first_name.lower() == first_name.strip().lower()
            and self.last_name.lower() == last_name.strip().lower()
        )

    def __str__(self) -> str:
        return self.full_name
