"""Single-game timeline stats and the cross-game aggregate built from them.

Single-game records are frozen: each is created once per (match, player) pair
and consumed only by the aggregator.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

GoldSwingReason = Literal["cs_deficit", "mixed"]


class _FrozenContract(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class GoldSwingWindow(_FrozenContract):
    """A 5-minute window where the player gained far less gold than expected."""

    match_id: str
    start_minute: int
    end_minute: int
    gold_lost: int = Field(..., description="Shortfall against the expected 2000g per window")
    reason: GoldSwingReason
    details: str = ""

    @property
    def severity(self) -> int:
        return self.gold_lost


class SingleGameStats(_FrozenContract):
    """Condensed timeline metrics for one player against one lane opponent."""

    match_id: str
    win: bool
    game_duration: int = Field(0, description="Seconds")

    # Checkpoints: None when the game has no frame at that minute
    gold_at_10: int | None = None
    gold_diff_at_10: int | None = None
    level_at_10: int | None = None
    level_diff_at_10: int | None = None
    gold_at_15: int | None = None
    gold_diff_at_15: int | None = None
    gold_at_20: int | None = None
    gold_diff_at_20: int | None = None

    max_lead: int = 0
    max_lead_minute: int = 0
    max_deficit: int = 0
    max_deficit_minute: int = 0
    throw_minute: int | None = None
    comeback_minute: int | None = None

    # Gold-threshold proxies for item completion, fractional minutes
    first_item_minute: float | None = None
    second_item_minute: float | None = None
    third_item_minute: float | None = None

    worst_gold_swing: GoldSwingWindow | None = None
    gold_from_kills: float = 0.0
    gold_from_cs: int = 0

    @property
    def is_throw(self) -> bool:
        return self.throw_minute is not None

    @property
    def is_comeback(self) -> bool:
        return self.comeback_minute is not None


class ThrowGame(_FrozenContract):
    match_id: str
    max_lead: int
    lead_at_minute: int
    throw_at_minute: int
    final_result: Literal["loss"] = "loss"


class ComebackGame(_FrozenContract):
    match_id: str
    max_deficit: int
    deficit_at_minute: int
    comeback_at_minute: int
    final_result: Literal["win"] = "win"


class GoldAnalysis(_FrozenContract):
    avg_gold_at_10: int = 0
    avg_gold_at_15: int = 0
    avg_gold_at_20: int = 0
    avg_gold_diff_at_10: int = 0
    avg_gold_diff_at_15: int = 0
    avg_gold_diff_at_20: int = 0
    games_at_10: int = 0
    games_at_15: int = 0
    games_at_20: int = 0
    avg_gold_from_kills: int = 0
    avg_gold_from_cs: int = 0
    avg_gold_from_objectives: int = 0  # not tracked by the frame heuristics
    worst_gold_swings: list[GoldSwingWindow] = Field(default_factory=list)
    games_with_timeline: int = 0


class LeadAnalysis(_FrozenContract):
    lead_rate_at_10: float = 0.0
    lead_rate_at_15: float = 0.0
    lead_rate_at_20: float = 0.0
    lead_conversion_rate: float = 0.0
    throw_rate: float = 0.0
    avg_throw_minute: float = 0.0
    comeback_rate: float = 0.0
    avg_max_lead: int = 0
    avg_max_deficit: int = 0
    biggest_throw: ThrowGame | None = None
    best_comeback: ComebackGame | None = None


class PowerSpikeAnalysis(_FrozenContract):
    avg_first_item_minute: float = 0.0
    avg_second_item_minute: float = 0.0
    avg_third_item_minute: float = 0.0
    first_item_delta: float = 0.0
    second_item_delta: float = 0.0
    third_item_delta: float = 0.0
    win_rate_with_fast_spike: float = 0.0
    win_rate_with_slow_spike: float = 0.0
    avg_level_at_10: float = 0.0
    avg_level_diff_at_10: float = 0.0


class AggregateAnalysis(_FrozenContract):
    """Cross-game rollup. Recomputed per request, never persisted."""

    role: str
    games_analyzed: int = 0
    gold: GoldAnalysis = Field(default_factory=GoldAnalysis)
    lead: LeadAnalysis = Field(default_factory=LeadAnalysis)
    power_spikes: PowerSpikeAnalysis = Field(default_factory=PowerSpikeAnalysis)
