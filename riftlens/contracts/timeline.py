"""
Match Timeline data contracts for Riot API Match-V5.
This is the core input structure for timeline analytics.
"""

from enum import Enum
from typing import Any

from pydantic import Field

from .common import RiotPayload


class RawEventType(str, Enum):
    """Timeline event types consumed by the event processor."""

    CHAMPION_KILL = "CHAMPION_KILL"
    ELITE_MONSTER_KILL = "ELITE_MONSTER_KILL"
    BUILDING_KILL = "BUILDING_KILL"


class ParticipantFrame(RiotPayload):
    """Cumulative participant totals at a specific frame."""

    participant_id: int | None = Field(None, ge=1, le=16)
    total_gold: int = Field(0)
    level: int = Field(1)
    minions_killed: int = Field(0)
    jungle_minions_killed: int = Field(0)

    @property
    def total_cs(self) -> int:
        return self.minions_killed + self.jungle_minions_killed


class TimelineEvent(RiotPayload):
    """A discrete timeline event.

    Fields are nullable because each event type populates a different subset:
    champion kills use killer/victim/assists/bounties, elite monster kills use
    killer team and monster type, building kills use team and building/tower type.
    """

    type: str
    timestamp: int = Field(0, description="Game time in milliseconds")

    # CHAMPION_KILL
    killer_id: int | None = None
    victim_id: int | None = None
    assisting_participant_ids: list[int] = Field(default_factory=list)
    bounty: int | None = None
    shutdown_bounty: int | None = None

    # ELITE_MONSTER_KILL
    killer_team_id: int | None = None
    monster_type: str | None = None
    monster_sub_type: str | None = None

    # BUILDING_KILL
    team_id: int | None = None
    building_type: str | None = None
    tower_type: str | None = None


class Frame(RiotPayload):
    """A single per-minute snapshot of the match."""

    timestamp: int = Field(..., description="Frame timestamp in milliseconds")
    participant_frames: dict[int, ParticipantFrame] = Field(
        default_factory=dict, description="Participant states indexed by participant slot"
    )
    events: list[TimelineEvent] = Field(default_factory=list)

    def participant(self, participant_id: int) -> ParticipantFrame | None:
        return self.participant_frames.get(participant_id)

    def total_gold(self, participant_id: int) -> int:
        """Participant gold, 0 when the slot is missing from this frame."""
        pf = self.participant_frames.get(participant_id)
        return pf.total_gold if pf else 0

    def total_cs(self, participant_id: int) -> int:
        pf = self.participant_frames.get(participant_id)
        return pf.total_cs if pf else 0

    def gold_diff(self, participant_id: int, opponent_id: int) -> int:
        return self.total_gold(participant_id) - self.total_gold(opponent_id)


class TimelineParticipant(RiotPayload):
    """Participant mapping in timeline."""

    participant_id: int = Field(..., ge=1, le=16)
    puuid: str = Field(..., description="Player's PUUID")


class MatchTimeline(RiotPayload):
    """Complete match timeline from Riot API Match-V5."""

    match_id: str = Field("", description="Match ID")
    frame_interval: int = Field(60000, description="Milliseconds between frames (usually 60000)")
    frames: list[Frame] = Field(default_factory=list)
    participants: list[TimelineParticipant] = Field(default_factory=list)

    @classmethod
    def from_riot(cls, payload: dict[str, Any], match_id: str | None = None) -> "MatchTimeline":
        """Build a timeline from the raw ``/lol/match/v5/matches/{id}/timeline`` JSON."""
        metadata = payload.get("metadata") or {}
        info = payload.get("info") or {}
        return cls.model_validate(
            {
                "match_id": match_id or metadata.get("matchId", ""),
                "frame_interval": info.get("frameInterval", 60000),
                "frames": info.get("frames") or [],
                "participants": info.get("participants") or [],
            }
        )

    @property
    def participant_map(self) -> dict[int, str]:
        """Participant slot -> PUUID."""
        return {p.participant_id: p.puuid for p in self.participants}

    def get_participant_by_puuid(self, puuid: str) -> int | None:
        """Get participant slot by PUUID."""
        for participant in self.participants:
            if participant.puuid == puuid:
                return participant.participant_id
        return None
