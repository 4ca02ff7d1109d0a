"""Single-game timeline frame analysis.

Condenses one match's per-minute frames into a ``SingleGameStats`` record for
one participant against a designated lane opponent, in one linear scan.

Item completion is inferred from cumulative gold crossing fixed thresholds
rather than from purchase events; the timings are approximate by construction.

CRITICAL: This module MUST NOT contain any I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from riftlens.contracts.timeline import Frame
from riftlens.contracts.timeline_analysis import GoldSwingWindow, SingleGameStats
from riftlens.core.observability import trace_performance
from riftlens.core.utils.rounding import MS_PER_MINUTE, floor_minute_of, minute_of

logger = logging.getLogger(__name__)

CHECKPOINT_MINUTES = (10, 15, 20)
LEVEL_CHECKPOINT_MINUTE = 10

THROW_LEAD_THRESHOLD = 2000
COMEBACK_DEFICIT_THRESHOLD = 2000

# Cumulative gold standing in for 1st / 2nd / 3rd completed item
ITEM_GOLD_THRESHOLDS = (3000, 6000, 9500)

SWING_WINDOW_MINUTES = 5
EXPECTED_GOLD_PER_WINDOW = 2000  # ~400 gold per minute
SWING_CS_DEFICIT_THRESHOLD = 20

CS_GOLD_ESTIMATE = 20
PASSIVE_GOLD_PER_MINUTE = 100


class _ExtremumTracker:
    """Running max of a signed series plus the first minute it was given back."""

    def __init__(self) -> None:
        self.value = 0
        self.minute = 0
        self.reversal_minute: int | None = None

    def update(self, value: int, minute: int, reversed_: bool) -> None:
        if value > self.value:
            self.value = value
            self.minute = minute
            self.reversal_minute = None
        elif reversed_ and minute > self.minute and self.reversal_minute is None:
            self.reversal_minute = minute


def estimate_gold_sources(
    frames: Sequence[Frame], participant_id: int, game_duration: int
) -> tuple[float, int]:
    """Approximate (gold from kills/objectives, gold from CS) from the final frame.

    CS gold is ``total CS * 20``; the remainder after subtracting passive income
    (100 gold per game minute) is attributed to kills and objectives, floored at 0.
    """
    if not frames:
        return 0.0, 0
    player = frames[-1].participant(participant_id)
    if player is None:
        return 0.0, 0

    from_cs = player.total_cs * CS_GOLD_ESTIMATE
    passive = game_duration / 60 * PASSIVE_GOLD_PER_MINUTE
    from_kills = max(0.0, player.total_gold - from_cs - passive)
    return from_kills, from_cs


@trace_performance
def analyze_single_timeline(
    match_id: str,
    frames: Sequence[Frame],
    participant_id: int,
    opponent_id: int,
    win: bool,
    game_duration: int,
) -> SingleGameStats:
    """Extract checkpoint, lead, throw/comeback, power-spike and gold-swing metrics.

    Args:
        match_id: Match the frames belong to (tags the gold-swing window)
        frames: Timeline frames ordered by timestamp
        participant_id: Analyzed player's slot (1-10)
        opponent_id: Lane opponent's slot (1-10)
        win: Whether the analyzed player won
        game_duration: Game duration in seconds

    Returns:
        SingleGameStats. Missing participant data counts as zero gold; a game
        without a frame at a checkpoint leaves that checkpoint as None.
    """
    checkpoints: dict[int, dict[str, int | None]] = {}
    lead = _ExtremumTracker()
    deficit = _ExtremumTracker()
    item_minutes: list[float | None] = [None] * len(ITEM_GOLD_THRESHOLDS)

    swing_marks: dict[int, tuple[int, int]] = {}
    worst_swing: GoldSwingWindow | None = None

    for frame in frames:
        rounded_minute = minute_of(frame.timestamp)
        elapsed_minute = floor_minute_of(frame.timestamp)
        player = frame.participant(participant_id)
        opponent = frame.participant(opponent_id)

        gold = frame.total_gold(participant_id)
        diff = gold - frame.total_gold(opponent_id)

        if rounded_minute in CHECKPOINT_MINUTES and rounded_minute not in checkpoints:
            snapshot: dict[str, int | None] = {"gold": gold, "gold_diff": diff}
            if rounded_minute == LEVEL_CHECKPOINT_MINUTE and player and opponent:
                snapshot["level"] = player.level
                snapshot["level_diff"] = player.level - opponent.level
            checkpoints[rounded_minute] = snapshot

        lead.update(diff, elapsed_minute, reversed_=diff <= 0)
        deficit.update(-diff, elapsed_minute, reversed_=diff >= 0)

        if player is not None:
            for i, threshold in enumerate(ITEM_GOLD_THRESHOLDS):
                if item_minutes[i] is None and player.total_gold >= threshold:
                    item_minutes[i] = frame.timestamp / MS_PER_MINUTE

        if rounded_minute % SWING_WINDOW_MINUTES == 0 and rounded_minute not in swing_marks:
            cs = frame.total_cs(participant_id)
            swing_marks[rounded_minute] = (gold, cs)
            previous = swing_marks.get(rounded_minute - SWING_WINDOW_MINUTES)
            if previous is not None:
                gained = gold - previous[0]
                if gained < EXPECTED_GOLD_PER_WINDOW * 0.5:
                    gold_lost = EXPECTED_GOLD_PER_WINDOW - gained
                    if worst_swing is None or gold_lost > worst_swing.gold_lost:
                        worst_swing = GoldSwingWindow(
                            match_id=match_id,
                            start_minute=rounded_minute - SWING_WINDOW_MINUTES,
                            end_minute=rounded_minute,
                            gold_lost=gold_lost,
                            reason=(
                                "cs_deficit"
                                if cs - previous[1] < SWING_CS_DEFICIT_THRESHOLD
                                else "mixed"
                            ),
                            details=f"Only gained {gained}g (expected ~{EXPECTED_GOLD_PER_WINDOW}g)",
                        )

    throw_minute: int | None = None
    if lead.value >= THROW_LEAD_THRESHOLD and not win:
        throw_minute = lead.reversal_minute if lead.reversal_minute is not None else lead.minute

    comeback_minute: int | None = None
    if deficit.value >= COMEBACK_DEFICIT_THRESHOLD and win:
        comeback_minute = (
            deficit.reversal_minute if deficit.reversal_minute is not None else deficit.minute
        )

    if opponent_id and frames and frames[-1].participant(opponent_id) is None:
        logger.warning(
            "Lane opponent %s missing from timeline of %s; gold diffs use 0 for opponent",
            opponent_id,
            match_id,
        )

    from_kills, from_cs = estimate_gold_sources(frames, participant_id, game_duration)
    at10 = checkpoints.get(10, {})
    at15 = checkpoints.get(15, {})
    at20 = checkpoints.get(20, {})

    return SingleGameStats(
        match_id=match_id,
        win=win,
        game_duration=game_duration,
        gold_at_10=at10.get("gold"),
        gold_diff_at_10=at10.get("gold_diff"),
        level_at_10=at10.get("level"),
        level_diff_at_10=at10.get("level_diff"),
        gold_at_15=at15.get("gold"),
        gold_diff_at_15=at15.get("gold_diff"),
        gold_at_20=at20.get("gold"),
        gold_diff_at_20=at20.get("gold_diff"),
        max_lead=lead.value,
        max_lead_minute=lead.minute,
        max_deficit=deficit.value,
        max_deficit_minute=deficit.minute,
        throw_minute=throw_minute,
        comeback_minute=comeback_minute,
        first_item_minute=item_minutes[0],
        second_item_minute=item_minutes[1],
        third_item_minute=item_minutes[2],
        worst_gold_swing=worst_swing,
        gold_from_kills=from_kills,
        gold_from_cs=from_cs,
    )
