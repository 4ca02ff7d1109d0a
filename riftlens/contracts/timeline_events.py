"""Processed (derived) timeline events and teamfight clusters."""

from enum import Enum

from pydantic import Field

from .common import BaseContract, Team


class ProcessedEventType(str, Enum):
    """Closed set of derived event tags."""

    KILL = "KILL"
    MULTI_KILL = "MULTI_KILL"
    ACE = "ACE"
    DRAGON = "DRAGON"
    BARON = "BARON"
    HERALD = "HERALD"
    GRUBS = "GRUBS"
    TOWER = "TOWER"
    INHIBITOR = "INHIBITOR"


class ProcessedEvent(BaseContract):
    """A derived event. Only ``kill_count`` of a MULTI_KILL is ever updated after creation."""

    timestamp: int = Field(..., description="Game time in milliseconds")
    minute: int = Field(..., ge=0)
    type: ProcessedEventType
    team_id: Team = Field(..., description="Team that gained the advantage")
    participant_id: int | None = Field(None, description="Killer slot for kill events")
    victim_id: int | None = None
    assist_ids: list[int] = Field(default_factory=list)
    kill_count: int | None = Field(None, ge=2, description="Kills merged into a MULTI_KILL")
    monster_type: str | None = None
    tower_type: str | None = None
    gold_swing: int = Field(0, description="Approximate gold value of the event")

    @property
    def kills(self) -> int:
        """Champion kills represented by this event (0 for objectives)."""
        if self.type == ProcessedEventType.MULTI_KILL:
            return self.kill_count or 2
        if self.type == ProcessedEventType.KILL:
            return 1
        return 0


class Teamfight(BaseContract):
    """A cluster of kills anchored at its first kill."""

    timestamp: int
    minute: int
    blue_kills: int = 0
    red_kills: int = 0
    events: list[ProcessedEvent] = Field(default_factory=list)

    @property
    def total_kills(self) -> int:
        return self.blue_kills + self.red_kills


class TimelineEventsReport(BaseContract):
    """Event processor output for one match."""

    match_id: str = ""
    frame_interval: int = 60000
    participant_map: dict[int, str] = Field(default_factory=dict)
    events: list[ProcessedEvent] = Field(default_factory=list)
    teamfights: list[Teamfight] = Field(default_factory=list)
