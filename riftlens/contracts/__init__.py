"""Contract models for data validation."""

from .common import ROLE_ORDER, BaseContract, Role, RiotPayload, Team, normalize_role
from .live_game import LiveGameParticipant, RosterPlayer
from .match import MatchParticipant, MatchSummary
from .timeline import (
    Frame,
    MatchTimeline,
    ParticipantFrame,
    RawEventType,
    TimelineEvent,
    TimelineParticipant,
)
from .timeline_analysis import (
    AggregateAnalysis,
    ComebackGame,
    GoldAnalysis,
    GoldSwingWindow,
    LeadAnalysis,
    PowerSpikeAnalysis,
    SingleGameStats,
    ThrowGame,
)
from .timeline_events import ProcessedEvent, ProcessedEventType, Teamfight, TimelineEventsReport

__all__ = [
    "ROLE_ORDER",
    "BaseContract",
    "RiotPayload",
    "Role",
    "Team",
    "normalize_role",
    "RosterPlayer",
    "LiveGameParticipant",
    "MatchParticipant",
    "MatchSummary",
    "Frame",
    "MatchTimeline",
    "ParticipantFrame",
    "RawEventType",
    "TimelineEvent",
    "TimelineParticipant",
    "AggregateAnalysis",
    "ComebackGame",
    "GoldAnalysis",
    "GoldSwingWindow",
    "LeadAnalysis",
    "PowerSpikeAnalysis",
    "SingleGameStats",
    "ThrowGame",
    "ProcessedEvent",
    "ProcessedEventType",
    "Teamfight",
    "TimelineEventsReport",
]
