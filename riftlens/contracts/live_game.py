"""Live-game roster contracts used by role assignment."""

from pydantic import Field

from .common import RiotPayload


class RosterPlayer(RiotPayload):
    """One player as seen by the role assignment engine."""

    champion_id: int
    spell1_id: int = 0
    spell2_id: int = 0
    index: int = Field(..., ge=0, description="Slot index within the roster (0-9)")

    @property
    def spells(self) -> tuple[int, int]:
        return (self.spell1_id, self.spell2_id)


class LiveGameParticipant(RiotPayload):
    """Spectator-V5 participant (only the fields role assignment reads)."""

    puuid: str = ""
    champion_id: int
    team_id: int = Field(100)
    spell1_id: int = 0
    spell2_id: int = 0
