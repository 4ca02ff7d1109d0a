"""Unit tests for the timeline event processor."""

from riftlens.contracts.common import Team
from riftlens.contracts.timeline import Frame, MatchTimeline, TimelineEvent, TimelineParticipant
from riftlens.contracts.timeline_events import ProcessedEventType
from riftlens.core.services.timeline_event_processor import process_timeline_events

SECOND = 1000
MINUTE = 60 * SECOND


def _of_type(report, event_type):
    return [e for e in report.events if e.type == event_type]


# ========== Kills and multi-kills ==========


def test_plain_kill_carries_victim_assists_and_default_bounty(make_kill, make_timeline):
    report = process_timeline_events(
        make_timeline([make_kill(5 * MINUTE, killer_id=2, victim_id=7, assists=[1, 3])])
    )

    assert len(report.events) == 1
    kill = report.events[0]
    assert kill.type == ProcessedEventType.KILL
    assert kill.team_id == Team.BLUE
    assert kill.participant_id == 2
    assert kill.victim_id == 7
    assert kill.assist_ids == [1, 3]
    assert kill.gold_swing == 300
    assert kill.minute == 5


def test_kill_gold_includes_shutdown_bounty(make_kill, make_timeline):
    report = process_timeline_events(
        make_timeline([make_kill(0, 8, 3, bounty=400, shutdown_bounty=150)])
    )

    assert report.events[0].gold_swing == 550
    assert report.events[0].team_id == Team.RED


def test_three_quick_kills_become_one_multi_kill(make_kill, make_timeline):
    events = [
        make_kill(0, 1, 6, assists=[2]),
        make_kill(4 * SECOND, 1, 7),
        make_kill(9 * SECOND, 1, 8, assists=[3]),
    ]

    report = process_timeline_events(make_timeline(events))

    assert _of_type(report, ProcessedEventType.KILL) == []
    multis = _of_type(report, ProcessedEventType.MULTI_KILL)
    assert len(multis) == 1
    assert multis[0].kill_count == 3
    assert multis[0].timestamp == 0
    assert multis[0].assist_ids == [2, 3]
    assert multis[0].gold_swing == 900


def test_fourth_kill_extends_active_multi_kill(make_kill, make_timeline):
    events = [
        make_kill(0, 1, 6),
        make_kill(4 * SECOND, 1, 7),
        make_kill(9 * SECOND, 1, 8),
        make_kill(12 * SECOND, 1, 9, assists=[4], bounty=400),
    ]

    report = process_timeline_events(make_timeline(events))

    multis = _of_type(report, ProcessedEventType.MULTI_KILL)
    assert len(multis) == 1
    assert multis[0].kill_count == 4
    # The extending kill adds its gold and assists to the open multi-kill
    assert multis[0].gold_swing == 3 * 300 + 400
    assert multis[0].assist_ids == [4]


def test_kills_spread_out_stay_separate(make_kill, make_timeline):
    events = [make_kill(0, 1, 6), make_kill(11 * SECOND, 1, 7), make_kill(22 * SECOND, 1, 8)]

    report = process_timeline_events(make_timeline(events))

    assert len(_of_type(report, ProcessedEventType.KILL)) == 3
    assert _of_type(report, ProcessedEventType.MULTI_KILL) == []


def test_other_killers_do_not_count_toward_multi_kill(make_kill, make_timeline):
    events = [make_kill(0, 1, 6), make_kill(2 * SECOND, 2, 7), make_kill(4 * SECOND, 3, 8)]

    report = process_timeline_events(make_timeline(events))

    assert len(_of_type(report, ProcessedEventType.KILL)) == 3


def test_kill_by_another_player_after_multi_kill_stays_separate(make_kill, make_timeline):
    events = [
        make_kill(0, 1, 6),
        make_kill(4 * SECOND, 1, 7),
        make_kill(9 * SECOND, 1, 8),
        make_kill(20 * SECOND, 2, 9),
    ]

    report = process_timeline_events(make_timeline(events))

    assert [e.type for e in report.events] == [
        ProcessedEventType.MULTI_KILL,
        ProcessedEventType.KILL,
    ]
    multi, kill = report.events
    assert multi.participant_id == 1
    assert multi.kill_count == 3
    assert kill.participant_id == 2
    assert kill.victim_id == 9
    assert kill.timestamp == 20 * SECOND


def test_kill_without_killer_is_ignored(make_kill, make_timeline):
    # Executions (tower / minion kills) report killerId 0
    report = process_timeline_events(make_timeline([make_kill(0, 0, 6)]))

    assert report.events == []


# ========== Aces ==========


def test_ace_when_whole_team_dies_within_window(make_kill, make_timeline):
    events = [make_kill(i * 5 * SECOND, killer_id=i + 1, victim_id=i + 6) for i in range(5)]

    report = process_timeline_events(make_timeline(events))

    aces = _of_type(report, ProcessedEventType.ACE)
    assert len(aces) == 1
    assert aces[0].team_id == Team.BLUE
    assert aces[0].timestamp == 20 * SECOND
    assert aces[0].participant_id == 5


def test_no_ace_when_deaths_are_spread_out(make_kill, make_timeline):
    times = [0, 10, 20, 30, 45]
    events = [make_kill(t * SECOND, killer_id=i + 1, victim_id=i + 6) for i, t in enumerate(times)]

    report = process_timeline_events(make_timeline(events))

    assert _of_type(report, ProcessedEventType.ACE) == []


def test_same_victim_twice_does_not_complete_ace(make_kill, make_timeline):
    victims = [1, 2, 3, 4, 4]
    events = [
        make_kill(i * 3 * SECOND, killer_id=6 + i, victim_id=v) for i, v in enumerate(victims)
    ]

    report = process_timeline_events(make_timeline(events))

    assert _of_type(report, ProcessedEventType.ACE) == []


# ========== Objectives ==========


def _monster(ts, team, monster_type, sub_type=None):
    return TimelineEvent(
        type="ELITE_MONSTER_KILL",
        timestamp=ts,
        killer_team_id=team,
        monster_type=monster_type,
        monster_sub_type=sub_type,
    )


def test_monster_kills_are_tagged_with_gold_estimates(make_timeline):
    events = [
        _monster(6 * MINUTE, 100, "HORDE"),
        _monster(8 * MINUTE, 200, "DRAGON", "FIRE_DRAGON"),
        _monster(14 * MINUTE, 100, "RIFTHERALD"),
        _monster(25 * MINUTE, 200, "BARON_NASHOR"),
        _monster(35 * MINUTE, 100, "DRAGON", "ELDER_DRAGON"),
    ]

    report = process_timeline_events(make_timeline(events))

    summary = [(e.type, e.team_id, e.gold_swing) for e in report.events]
    assert summary == [
        (ProcessedEventType.GRUBS, 100, 150),
        (ProcessedEventType.DRAGON, 200, 200),
        (ProcessedEventType.HERALD, 100, 400),
        (ProcessedEventType.BARON, 200, 1500),
        (ProcessedEventType.DRAGON, 100, 1000),
    ]
    assert report.events[1].monster_type == "FIRE_DRAGON"


def test_duplicate_monster_kill_in_adjacent_frames_counted_once():
    dragon = _monster(8 * MINUTE + 500, 100, "DRAGON", "EARTH_DRAGON")
    timeline = MatchTimeline(
        match_id="NA1_1",
        frames=[
            Frame(timestamp=8 * MINUTE, events=[dragon]),
            Frame(timestamp=9 * MINUTE, events=[dragon]),
        ],
    )

    report = process_timeline_events(timeline)

    assert len(_of_type(report, ProcessedEventType.DRAGON)) == 1


def test_unknown_monster_defaults_to_dragon_without_gold(make_timeline):
    report = process_timeline_events(make_timeline([_monster(20 * MINUTE, 200, "ATAKHAN")]))

    assert report.events[0].type == ProcessedEventType.DRAGON
    assert report.events[0].gold_swing == 0


def _building(ts, losing_team, building_type="TOWER_BUILDING", tower_type=None):
    return TimelineEvent(
        type="BUILDING_KILL",
        timestamp=ts,
        team_id=losing_team,
        building_type=building_type,
        tower_type=tower_type,
    )


def test_structures_credit_the_destroying_team(make_timeline):
    events = [
        _building(12 * MINUTE, 100, tower_type="OUTER_TURRET"),
        _building(18 * MINUTE, 200, tower_type="INNER_TURRET"),
        _building(24 * MINUTE, 100, tower_type="BASE_TURRET"),
        _building(25 * MINUTE, 100, building_type="INHIBITOR_BUILDING"),
    ]

    report = process_timeline_events(make_timeline(events))

    summary = [(e.type, e.team_id, e.gold_swing) for e in report.events]
    assert summary == [
        (ProcessedEventType.TOWER, 200, 250),
        (ProcessedEventType.TOWER, 100, 300),
        (ProcessedEventType.TOWER, 200, 350),
        (ProcessedEventType.INHIBITOR, 200, 50),
    ]


# ========== Teamfights ==========


def test_teamfight_clustering(make_kill, make_timeline):
    events = [
        make_kill(10 * MINUTE, 1, 6),
        make_kill(10 * MINUTE + 10 * SECOND, 7, 2),
        make_kill(10 * MINUTE + 20 * SECOND, 3, 8),
        make_kill(15 * MINUTE, 4, 9),
    ]

    report = process_timeline_events(make_timeline(events))

    assert len(report.teamfights) == 1
    fight = report.teamfights[0]
    assert fight.total_kills == 3
    assert fight.blue_kills == 2
    assert fight.red_kills == 1
    assert fight.minute == 10


def test_later_burst_starts_a_new_teamfight(make_kill, make_timeline):
    events = [
        make_kill(10 * MINUTE, 1, 6),
        make_kill(10 * MINUTE + 10 * SECOND, 2, 7),
        make_kill(10 * MINUTE + 20 * SECOND, 3, 8),
        make_kill(15 * MINUTE, 6, 1),
        make_kill(15 * MINUTE + 5 * SECOND, 7, 2),
        make_kill(15 * MINUTE + 20 * SECOND, 8, 3),
    ]

    report = process_timeline_events(make_timeline(events))

    assert [f.total_kills for f in report.teamfights] == [3, 3]
    assert report.teamfights[1].red_kills == 3


def test_multi_kill_counts_its_kills_in_teamfight(make_kill, make_timeline):
    events = [make_kill(0, 1, 6), make_kill(3 * SECOND, 1, 7), make_kill(6 * SECOND, 1, 8)]

    report = process_timeline_events(make_timeline(events))

    assert len(report.teamfights) == 1
    assert report.teamfights[0].blue_kills == 3


def test_two_isolated_kills_are_not_a_teamfight(make_kill, make_timeline):
    report = process_timeline_events(
        make_timeline([make_kill(0, 1, 6), make_kill(20 * SECOND, 7, 2)])
    )

    assert report.teamfights == []


# ========== Report shape ==========


def test_events_sorted_and_minutes_rounded(make_kill, make_timeline):
    events = [
        _building(90 * SECOND, 200, tower_type="OUTER_TURRET"),
        make_kill(89_999, 1, 6),
    ]
    timeline = MatchTimeline(
        match_id="NA1_1",
        frames=[Frame(timestamp=2 * MINUTE, events=[events[0]]), Frame(timestamp=0, events=[events[1]])],
    )

    report = process_timeline_events(timeline)

    assert [e.timestamp for e in report.events] == [89_999, 90_000]
    assert [e.minute for e in report.events] == [1, 2]


def test_report_carries_participant_map_and_interval(make_timeline):
    timeline = make_timeline(
        [],
        match_id="EUW1_42",
        frame_interval=60000,
        participants=[TimelineParticipant(participant_id=1, puuid="abc")],
    )

    report = process_timeline_events(timeline)

    assert report.match_id == "EUW1_42"
    assert report.frame_interval == 60000
    assert report.participant_map == {1: "abc"}
    assert report.events == []
    assert report.teamfights == []
