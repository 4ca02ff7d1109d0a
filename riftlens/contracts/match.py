"""Match summary contracts (Match-V5 ``/matches/{id}``), reduced to what analytics needs."""

from typing import Any

from pydantic import Field

from .common import Role, RiotPayload, normalize_role


class MatchParticipant(RiotPayload):
    """One participant of a finished match."""

    puuid: str = ""
    participant_id: int = Field(..., ge=1, le=16)
    team_id: int = Field(100)
    champion_id: int = Field(0)
    team_position: str = ""
    individual_position: str = ""
    win: bool = False

    @property
    def role(self) -> Role:
        return normalize_role(self.team_position or self.individual_position)


class MatchSummary(RiotPayload):
    """Finished match: participants, queue and duration (seconds)."""

    match_id: str
    queue_id: int = 0
    game_duration: int = Field(0, description="Game duration in seconds")
    participants: list[MatchParticipant] = Field(default_factory=list)

    @classmethod
    def from_riot(cls, payload: dict[str, Any]) -> "MatchSummary":
        metadata = payload.get("metadata") or {}
        info = payload.get("info") or {}
        return cls.model_validate(
            {
                "match_id": metadata.get("matchId", ""),
                "queue_id": info.get("queueId", 0),
                "game_duration": info.get("gameDuration", 0),
                "participants": info.get("participants") or [],
            }
        )

    def get_participant(self, puuid: str) -> MatchParticipant | None:
        for participant in self.participants:
            if participant.puuid == puuid:
                return participant
        return None
