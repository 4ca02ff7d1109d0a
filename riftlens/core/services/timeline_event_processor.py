"""Timeline event processing: raw Match-V5 events -> derived game events.

Single forward pass over one match's frames. Champion kills are merged into
multi-kills and aces, elite monster kills are de-duplicated across adjacent
frames, structure kills are credited to the destroying team, and kills are
finally clustered into teamfights.

CRITICAL: pure domain logic, no I/O.
"""

from __future__ import annotations

import logging
from collections import deque

from riftlens.contracts.common import Team
from riftlens.contracts.timeline import MatchTimeline, RawEventType, TimelineEvent
from riftlens.contracts.timeline_events import (
    ProcessedEvent,
    ProcessedEventType,
    Teamfight,
    TimelineEventsReport,
)
from riftlens.core.observability import trace_service
from riftlens.core.utils.rounding import minute_of

logger = logging.getLogger(__name__)

MULTI_KILL_WINDOW_MS = 10_000
MULTI_KILL_MERGE_WINDOW_MS = 15_000
KILL_HISTORY_MS = 15_000
ACE_WINDOW_MS = 30_000
TEAMFIGHT_GAP_MS = 30_000
TEAMFIGHT_MIN_KILLS = 3
TEAM_SIZE = 5

DEFAULT_KILL_BOUNTY = 300

_MONSTER_EVENTS: dict[str, tuple[ProcessedEventType, int]] = {
    "BARON_NASHOR": (ProcessedEventType.BARON, 1500),
    "DRAGON": (ProcessedEventType.DRAGON, 200),
    "RIFTHERALD": (ProcessedEventType.HERALD, 400),
    "HORDE": (ProcessedEventType.GRUBS, 150),
}
ELDER_DRAGON_BONUS = 800

_TOWER_GOLD = {"OUTER_TURRET": 250, "INNER_TURRET": 300}
DEFAULT_TOWER_GOLD = 350
INHIBITOR_GOLD = 50


class _KillTracker:
    """Per-match multi-kill and ace bookkeeping."""

    def __init__(self) -> None:
        # killer -> recent [timestamp, plain KILL event or None once absorbed]
        self.history: dict[int, deque[list]] = {}
        # killer -> (active MULTI_KILL, timestamp of its latest kill)
        self.active_multi: dict[int, tuple[ProcessedEvent, int]] = {}
        # victim team -> victim slot -> death timestamp
        self.deaths: dict[Team, dict[int, int]] = {Team.BLUE: {}, Team.RED: {}}

    def recent_kills(self, killer_id: int, ts: int) -> deque[list]:
        window = self.history.setdefault(killer_id, deque())
        while window and ts - window[0][0] > KILL_HISTORY_MS:
            window.popleft()
        return window

    def record_death(self, victim_id: int, ts: int) -> bool:
        """Register a death; True when it completes an ace on the victim's team."""
        team_deaths = self.deaths[Team.of_slot(victim_id)]
        team_deaths[victim_id] = ts
        for slot, died_at in list(team_deaths.items()):
            if ts - died_at > ACE_WINDOW_MS:
                del team_deaths[slot]
        if len(team_deaths) >= TEAM_SIZE:
            team_deaths.clear()
            return True
        return False


def _kill_gold(event: TimelineEvent) -> int:
    return (event.bounty or DEFAULT_KILL_BOUNTY) + (event.shutdown_bounty or 0)


def _process_kill(
    event: TimelineEvent, tracker: _KillTracker, out: list[ProcessedEvent]
) -> None:
    killer_id = event.killer_id or 0
    victim_id = event.victim_id or 0
    ts = event.timestamp
    killer_team = Team.of_slot(killer_id)
    minute = minute_of(ts)

    window = tracker.recent_kills(killer_id, ts)
    recent = [entry for entry in window if ts - entry[0] < MULTI_KILL_WINDOW_MS]

    if len(recent) >= 2:
        active = tracker.active_multi.get(killer_id)
        if active is not None and ts - active[1] < MULTI_KILL_MERGE_WINDOW_MS:
            multi = active[0]
            multi.kill_count = (multi.kill_count or 2) + 1
            multi.gold_swing += _kill_gold(event)
            multi.assist_ids = sorted(set(multi.assist_ids) | set(event.assisting_participant_ids))
        else:
            # Fold the killer's preceding plain kills into the new multi-kill
            absorbed = [entry[1] for entry in recent if entry[1] is not None]
            for entry in recent:
                entry[1] = None
            absorbed_ids = {id(kill) for kill in absorbed}
            out[:] = [e for e in out if id(e) not in absorbed_ids]
            assists: set[int] = set(event.assisting_participant_ids)
            for kill in absorbed:
                assists.update(kill.assist_ids)
            start_ts = recent[0][0]
            multi = ProcessedEvent(
                timestamp=start_ts,
                minute=minute_of(start_ts),
                type=ProcessedEventType.MULTI_KILL,
                team_id=killer_team,
                participant_id=killer_id,
                assist_ids=sorted(assists),
                kill_count=len(recent) + 1,
                gold_swing=sum(k.gold_swing for k in absorbed) + _kill_gold(event),
            )
            out.append(multi)
        tracker.active_multi[killer_id] = (multi, ts)
        window.append([ts, None])
    else:
        kill = ProcessedEvent(
            timestamp=ts,
            minute=minute,
            type=ProcessedEventType.KILL,
            team_id=killer_team,
            participant_id=killer_id,
            victim_id=victim_id,
            assist_ids=list(event.assisting_participant_ids),
            gold_swing=_kill_gold(event),
        )
        out.append(kill)
        window.append([ts, kill])

    if tracker.record_death(victim_id, ts):
        out.append(
            ProcessedEvent(
                timestamp=ts,
                minute=minute,
                type=ProcessedEventType.ACE,
                team_id=Team.of_slot(victim_id).opponent,
                participant_id=killer_id,
            )
        )


def _process_monster(event: TimelineEvent) -> ProcessedEvent:
    monster = event.monster_type or ""
    event_type, gold = _MONSTER_EVENTS.get(monster, (ProcessedEventType.DRAGON, 0))
    if monster == "DRAGON" and event.monster_sub_type == "ELDER_DRAGON":
        gold += ELDER_DRAGON_BONUS
    return ProcessedEvent(
        timestamp=event.timestamp,
        minute=minute_of(event.timestamp),
        type=event_type,
        team_id=event.killer_team_id,
        monster_type=event.monster_sub_type or monster or None,
        gold_swing=gold,
    )


def _process_building(event: TimelineEvent) -> ProcessedEvent:
    is_inhibitor = event.building_type == "INHIBITOR_BUILDING"
    # Building events record the team that lost the structure
    destroyed_by = Team(event.team_id).opponent
    if is_inhibitor:
        gold = INHIBITOR_GOLD
    else:
        gold = _TOWER_GOLD.get(event.tower_type or "", DEFAULT_TOWER_GOLD)
    return ProcessedEvent(
        timestamp=event.timestamp,
        minute=minute_of(event.timestamp),
        type=ProcessedEventType.INHIBITOR if is_inhibitor else ProcessedEventType.TOWER,
        team_id=destroyed_by,
        tower_type=event.tower_type or event.building_type,
        gold_swing=gold,
    )


def detect_teamfights(events: list[ProcessedEvent]) -> list[Teamfight]:
    """Cluster KILL / MULTI_KILL events into teamfights.

    A cluster is anchored at its first kill; a kill more than 30s after the
    anchor starts a new cluster. Clusters with fewer than 3 kills (counting a
    multi-kill's full kill count) are dropped.
    """
    teamfights: list[Teamfight] = []
    current: Teamfight | None = None

    def _close(fight: Teamfight | None) -> None:
        if fight is not None and fight.total_kills >= TEAMFIGHT_MIN_KILLS:
            teamfights.append(fight)

    kill_types = (ProcessedEventType.KILL, ProcessedEventType.MULTI_KILL)
    for kill in (e for e in events if e.type in kill_types):
        if current is None or kill.timestamp - current.timestamp > TEAMFIGHT_GAP_MS:
            _close(current)
            current = Teamfight(timestamp=kill.timestamp, minute=kill.minute)
        if kill.team_id == Team.BLUE:
            current.blue_kills += kill.kills
        else:
            current.red_kills += kill.kills
        current.events.append(kill)
    _close(current)

    return teamfights


@trace_service
def process_timeline_events(timeline: MatchTimeline) -> TimelineEventsReport:
    """Derive the processed event list and teamfights for one match."""
    processed: list[ProcessedEvent] = []
    tracker = _KillTracker()
    seen_monsters: set[tuple[int, str | None]] = set()

    for frame in timeline.frames:
        for event in frame.events:
            if event.type == RawEventType.CHAMPION_KILL:
                if event.killer_id and event.victim_id:
                    _process_kill(event, tracker, processed)
            elif event.type == RawEventType.ELITE_MONSTER_KILL:
                if event.killer_team_id not in (Team.BLUE, Team.RED):
                    continue
                key = (event.timestamp, event.monster_type)
                if key in seen_monsters:
                    logger.debug("Skipping duplicate monster kill at %s (%s)", *key)
                    continue
                seen_monsters.add(key)
                processed.append(_process_monster(event))
            elif event.type == RawEventType.BUILDING_KILL:
                if event.team_id in (Team.BLUE, Team.RED):
                    processed.append(_process_building(event))

    processed.sort(key=lambda e: e.timestamp)

    return TimelineEventsReport(
        match_id=timeline.match_id,
        frame_interval=timeline.frame_interval,
        participant_map=timeline.participant_map,
        events=processed,
        teamfights=detect_teamfights(processed),
    )
