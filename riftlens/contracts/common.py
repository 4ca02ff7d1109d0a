"""
Common data types and base models for riftlens.
All models use Pydantic V2.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Team(int, Enum):
    """Team ids as used by Match-V5 (participant slots 1-5 are blue, 6-10 red)."""

    BLUE = 100
    RED = 200

    @classmethod
    def of_slot(cls, participant_id: int) -> "Team":
        """Team owning a participant slot. The 1-5 / 6-10 split is fixed by the source data."""
        return cls.BLUE if participant_id <= 5 else cls.RED

    @property
    def opponent(self) -> "Team":
        return Team.RED if self is Team.BLUE else Team.BLUE


class Role(str, Enum):
    """Lane roles in canonical display order."""

    TOP = "TOP"
    JUNGLE = "JUNGLE"
    MIDDLE = "MIDDLE"
    BOTTOM = "BOTTOM"
    UTILITY = "UTILITY"


ROLE_ORDER: tuple[Role, ...] = tuple(Role)

_ROLE_ALIASES: dict[str, Role] = {
    "TOP": Role.TOP,
    "JUNGLE": Role.JUNGLE,
    "MIDDLE": Role.MIDDLE,
    "MID": Role.MIDDLE,
    "BOTTOM": Role.BOTTOM,
    "ADC": Role.BOTTOM,
    "UTILITY": Role.UTILITY,
    "SUPPORT": Role.UTILITY,
}


def normalize_role(position: str | None) -> Role:
    """Map Match-V5 position strings (and common aliases) to a Role; unknown -> MIDDLE."""
    return _ROLE_ALIASES.get((position or "").upper(), Role.MIDDLE)


class BaseContract(BaseModel):
    """Base model for all data contracts with common configuration."""

    model_config = ConfigDict(
        # Validate data on assignment
        validate_assignment=True,
        # Use enum values in JSON
        use_enum_values=True,
        # Forbid extra fields to ensure data integrity
        extra="forbid",
    )


class RiotPayload(BaseModel):
    """Base model for records parsed from raw Riot API JSON.

    Riot payloads are camelCase and grow new keys every patch, so unknown
    keys are ignored rather than rejected. Parsed records are immutable.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )
