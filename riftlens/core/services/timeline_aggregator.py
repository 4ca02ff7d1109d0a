"""Cross-game aggregation of single-game timeline stats.

Pure domain functions with zero I/O. Every ratio is guarded: an empty
denominator yields 0, never NaN or an exception.

Checkpoint averages only count games that reached the checkpoint; throw and
comeback rates are over all analyzed games.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

import numpy as np

from riftlens.contracts.common import Role, normalize_role
from riftlens.contracts.timeline_analysis import (
    AggregateAnalysis,
    ComebackGame,
    GoldAnalysis,
    GoldSwingWindow,
    LeadAnalysis,
    PowerSpikeAnalysis,
    SingleGameStats,
    ThrowGame,
)
from riftlens.core.observability import trace_service
from riftlens.core.utils.rounding import round_half_up, round_int, safe_percent

logger = logging.getLogger(__name__)

# Minutes to complete first / second / third item, by role
ITEM_BENCHMARKS: dict[Role, tuple[int, int, int]] = {
    Role.TOP: (10, 18, 25),
    Role.JUNGLE: (9, 17, 24),
    Role.MIDDLE: (10, 18, 25),
    Role.BOTTOM: (11, 19, 26),
    Role.UTILITY: (14, 22, 30),
}

MAX_WORST_GOLD_SWINGS = 5


def _mean(values: Iterable[float]) -> float:
    data = list(values)
    if not data:
        return 0.0
    return float(np.mean(data).item())


def _present(values: Iterable[float | None]) -> list[float]:
    return [v for v in values if v is not None]


def analyze_gold(games: Sequence[SingleGameStats]) -> GoldAnalysis:
    if not games:
        return GoldAnalysis()

    gold_at = {
        10: _present(g.gold_at_10 for g in games),
        15: _present(g.gold_at_15 for g in games),
        20: _present(g.gold_at_20 for g in games),
    }
    diff_at = {
        10: _present(g.gold_diff_at_10 for g in games),
        15: _present(g.gold_diff_at_15 for g in games),
        20: _present(g.gold_diff_at_20 for g in games),
    }

    swings = [g.worst_gold_swing for g in games if g.worst_gold_swing is not None]
    # Stable sort: equal severities keep game order
    worst: list[GoldSwingWindow] = sorted(swings, key=lambda s: s.severity, reverse=True)

    return GoldAnalysis(
        avg_gold_at_10=round_int(_mean(gold_at[10])),
        avg_gold_at_15=round_int(_mean(gold_at[15])),
        avg_gold_at_20=round_int(_mean(gold_at[20])),
        avg_gold_diff_at_10=round_int(_mean(diff_at[10])),
        avg_gold_diff_at_15=round_int(_mean(diff_at[15])),
        avg_gold_diff_at_20=round_int(_mean(diff_at[20])),
        games_at_10=len(gold_at[10]),
        games_at_15=len(gold_at[15]),
        games_at_20=len(gold_at[20]),
        avg_gold_from_kills=round_int(_mean(g.gold_from_kills for g in games)),
        avg_gold_from_cs=round_int(_mean(g.gold_from_cs for g in games)),
        avg_gold_from_objectives=0,
        worst_gold_swings=worst[:MAX_WORST_GOLD_SWINGS],
        games_with_timeline=len(games),
    )


def _lead_rate(diffs: Iterable[int | None]) -> float:
    present = _present(diffs)
    return safe_percent(sum(1 for d in present if d > 0), len(present))


def analyze_leads(games: Sequence[SingleGameStats]) -> LeadAnalysis:
    if not games:
        return LeadAnalysis()

    led_at_15 = [g for g in games if g.gold_diff_at_15 is not None and g.gold_diff_at_15 > 0]

    biggest_throw: SingleGameStats | None = None
    best_comeback: SingleGameStats | None = None
    throw_minutes: list[int] = []
    comebacks = 0
    for game in games:
        if game.throw_minute is not None:
            throw_minutes.append(game.throw_minute)
            # Strict comparison: on equal severity the earlier game is kept
            if biggest_throw is None or game.max_lead > biggest_throw.max_lead:
                biggest_throw = game
        if game.comeback_minute is not None:
            comebacks += 1
            if best_comeback is None or game.max_deficit > best_comeback.max_deficit:
                best_comeback = game

    count = len(games)
    return LeadAnalysis(
        lead_rate_at_10=_lead_rate(g.gold_diff_at_10 for g in games),
        lead_rate_at_15=_lead_rate(g.gold_diff_at_15 for g in games),
        lead_rate_at_20=_lead_rate(g.gold_diff_at_20 for g in games),
        lead_conversion_rate=safe_percent(sum(1 for g in led_at_15 if g.win), len(led_at_15)),
        throw_rate=safe_percent(len(throw_minutes), count),
        avg_throw_minute=_mean(throw_minutes),
        comeback_rate=safe_percent(comebacks, count),
        avg_max_lead=round_int(_mean(g.max_lead for g in games)),
        avg_max_deficit=round_int(_mean(g.max_deficit for g in games)),
        biggest_throw=(
            ThrowGame(
                match_id=biggest_throw.match_id,
                max_lead=biggest_throw.max_lead,
                lead_at_minute=biggest_throw.max_lead_minute,
                throw_at_minute=biggest_throw.throw_minute,
            )
            if biggest_throw is not None and biggest_throw.throw_minute is not None
            else None
        ),
        best_comeback=(
            ComebackGame(
                match_id=best_comeback.match_id,
                max_deficit=best_comeback.max_deficit,
                deficit_at_minute=best_comeback.max_deficit_minute,
                comeback_at_minute=best_comeback.comeback_minute,
            )
            if best_comeback is not None and best_comeback.comeback_minute is not None
            else None
        ),
    )


def _delta(values: list[float], benchmark: int) -> float:
    """Average minus benchmark; positive means slower than benchmark."""
    if not values:
        return 0.0
    return round_half_up(_mean(values) - benchmark, 1)


def analyze_power_spikes(games: Sequence[SingleGameStats], role: Role) -> PowerSpikeAnalysis:
    if not games:
        return PowerSpikeAnalysis()

    first_bench, second_bench, third_bench = ITEM_BENCHMARKS.get(role, ITEM_BENCHMARKS[Role.MIDDLE])

    firsts = _present(g.first_item_minute for g in games)
    seconds = _present(g.second_item_minute for g in games)
    thirds = _present(g.third_item_minute for g in games)

    fast = [g for g in games if g.first_item_minute is not None and g.first_item_minute <= first_bench]
    slow = [g for g in games if g.first_item_minute is not None and g.first_item_minute > first_bench]

    with_levels = [g for g in games if g.level_at_10 is not None and g.level_diff_at_10 is not None]

    return PowerSpikeAnalysis(
        avg_first_item_minute=round_half_up(_mean(firsts), 1),
        avg_second_item_minute=round_half_up(_mean(seconds), 1),
        avg_third_item_minute=round_half_up(_mean(thirds), 1),
        first_item_delta=_delta(firsts, first_bench),
        second_item_delta=_delta(seconds, second_bench),
        third_item_delta=_delta(thirds, third_bench),
        win_rate_with_fast_spike=safe_percent(sum(1 for g in fast if g.win), len(fast)),
        win_rate_with_slow_spike=safe_percent(sum(1 for g in slow if g.win), len(slow)),
        avg_level_at_10=round_half_up(_mean(g.level_at_10 for g in with_levels), 1),
        avg_level_diff_at_10=round_half_up(_mean(g.level_diff_at_10 for g in with_levels), 1),
    )


@trace_service
def aggregate_timeline_stats(
    games: Sequence[SingleGameStats], role: Role | str
) -> AggregateAnalysis:
    """Roll up single-game stats for a player's primary role.

    Unknown roles are benchmarked as MIDDLE. With no games, every figure is 0.
    """
    resolved = role if isinstance(role, Role) else normalize_role(role)
    if not games:
        return AggregateAnalysis(role=resolved.value)

    logger.debug("Aggregating %d games for role %s", len(games), resolved.value)
    return AggregateAnalysis(
        role=resolved.value,
        games_analyzed=len(games),
        gold=analyze_gold(games),
        lead=analyze_leads(games),
        power_spikes=analyze_power_spikes(games, resolved),
    )
