"""Pytest configuration and shared fixtures for riftlens tests.

Frames and events are built with the snake_case field names; the Riot
camelCase aliases are exercised separately in the contract tests.
"""

from collections.abc import Callable, Iterable
from typing import Any

import pytest

from riftlens.adapters.memory_cache import InMemoryTTLCache
from riftlens.contracts.timeline import Frame, MatchTimeline, ParticipantFrame, TimelineEvent

MINUTE_MS = 60_000


def build_frame(
    minute: float,
    gold: dict[int, int],
    *,
    cs: dict[int, int] | None = None,
    levels: dict[int, int] | None = None,
    events: Iterable[TimelineEvent] = (),
) -> Frame:
    cs = cs or {}
    levels = levels or {}
    return Frame(
        timestamp=int(minute * MINUTE_MS),
        participant_frames={
            pid: ParticipantFrame(
                participant_id=pid,
                total_gold=total,
                minions_killed=cs.get(pid, 0),
                level=levels.get(pid, 1),
            )
            for pid, total in gold.items()
        },
        events=list(events),
    )


def build_kill(
    timestamp: int,
    killer_id: int,
    victim_id: int,
    *,
    assists: Iterable[int] = (),
    bounty: int | None = None,
    shutdown_bounty: int | None = None,
) -> TimelineEvent:
    return TimelineEvent(
        type="CHAMPION_KILL",
        timestamp=timestamp,
        killer_id=killer_id,
        victim_id=victim_id,
        assisting_participant_ids=list(assists),
        bounty=bounty,
        shutdown_bounty=shutdown_bounty,
    )


def build_timeline(events: Iterable[TimelineEvent], **kwargs: Any) -> MatchTimeline:
    """Single-frame timeline holding every event, already in time order."""
    return MatchTimeline(
        match_id=kwargs.pop("match_id", "NA1_1000"),
        frames=[Frame(timestamp=0, events=list(events))],
        **kwargs,
    )


@pytest.fixture
def make_frame() -> Callable[..., Frame]:
    return build_frame


@pytest.fixture
def make_kill() -> Callable[..., TimelineEvent]:
    return build_kill


@pytest.fixture
def make_timeline() -> Callable[..., MatchTimeline]:
    return build_timeline


@pytest.fixture
def memory_cache() -> InMemoryTTLCache:
    return InMemoryTTLCache()
