"""Player timeline analysis orchestration.

Fetches timelines for a player's recent matches with bounded concurrency,
condenses each into SingleGameStats and aggregates them under the player's
main role. Per-game failures are logged and skipped; they never abort the batch.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from collections.abc import Sequence

from pydantic import ValidationError

from riftlens.adapters.riot_api import RiotAPIError
from riftlens.config.settings import get_settings
from riftlens.contracts.common import ROLE_ORDER, Role
from riftlens.contracts.match import MatchParticipant, MatchSummary
from riftlens.contracts.timeline import MatchTimeline
from riftlens.contracts.timeline_analysis import AggregateAnalysis, SingleGameStats
from riftlens.contracts.timeline_events import TimelineEventsReport
from riftlens.core.observability import trace_service
from riftlens.core.ports import RiotAPIPort
from riftlens.core.services.timeline_aggregator import aggregate_timeline_stats
from riftlens.core.services.timeline_event_processor import process_timeline_events
from riftlens.core.services.timeline_frame_analyzer import analyze_single_timeline

logger = logging.getLogger(__name__)


def determine_main_role(puuid: str, matches: Sequence[MatchSummary]) -> Role:
    """Most frequently played role; ties resolve in canonical role order, default MIDDLE."""
    counts: Counter[Role] = Counter()
    for match in matches:
        participant = match.get_participant(puuid)
        if participant is not None:
            counts[participant.role] += 1
    if not counts:
        return Role.MIDDLE
    top = max(counts.values())
    return next(role for role in ROLE_ORDER if counts[role] == top)


def resolve_lane_opponent(
    player: MatchParticipant,
    match: MatchSummary,
    timeline: MatchTimeline,
    participant_id: int,
) -> int:
    """Timeline slot of the enemy in the same role, else the mirrored slot."""
    for other in match.participants:
        if other.team_id == player.team_id or other.role != player.role:
            continue
        slot = timeline.get_participant_by_puuid(other.puuid)
        if slot is not None:
            return slot
    return participant_id + 5 if participant_id <= 5 else participant_id - 5


class TimelineAnalysisService:
    """Bridges the Riot API port to the frame analyzer, aggregator and event processor."""

    def __init__(
        self,
        riot_api: RiotAPIPort,
        *,
        region: str | None = None,
        concurrency: int | None = None,
        games_to_analyze: int | None = None,
    ) -> None:
        settings = get_settings()
        self.riot_api = riot_api
        self.region = region or settings.riot_region
        self.concurrency = concurrency or settings.timeline_fetch_concurrency
        self.games_to_analyze = games_to_analyze or settings.timeline_games_to_analyze

    determine_main_role = staticmethod(determine_main_role)
    resolve_lane_opponent = staticmethod(resolve_lane_opponent)

    async def _analyze_match(
        self, puuid: str, match: MatchSummary, semaphore: asyncio.Semaphore
    ) -> SingleGameStats | None:
        player = match.get_participant(puuid)
        if player is None:
            logger.debug("Player %s not in match %s", puuid, match.match_id)
            return None

        try:
            async with semaphore:
                raw = await self.riot_api.get_match_timeline(match.match_id, self.region)
            if raw is None:
                logger.warning("No timeline available for match %s", match.match_id)
                return None
            timeline = MatchTimeline.from_riot(raw, match_id=match.match_id)
        except RiotAPIError as e:
            logger.warning(f"Failed to fetch timeline for match {match.match_id}: {e}")
            return None
        except ValidationError as e:
            logger.warning(f"Malformed timeline for match {match.match_id}: {e}")
            return None

        participant_id = timeline.get_participant_by_puuid(puuid)
        if participant_id is None:
            logger.warning("Player %s missing from timeline of %s", puuid, match.match_id)
            return None

        opponent_id = resolve_lane_opponent(player, match, timeline, participant_id)
        return analyze_single_timeline(
            match.match_id,
            timeline.frames,
            participant_id,
            opponent_id,
            player.win,
            match.game_duration,
        )

    @trace_service
    async def analyze_player(
        self, puuid: str, matches: Sequence[MatchSummary]
    ) -> AggregateAnalysis | None:
        """Aggregate timeline stats over the player's most recent matches.

        Returns None when no game could be analyzed.
        """
        if not matches:
            return None

        main_role = determine_main_role(puuid, matches)
        recent = list(matches)[: self.games_to_analyze]
        semaphore = asyncio.Semaphore(self.concurrency)

        results = await asyncio.gather(
            *(self._analyze_match(puuid, match, semaphore) for match in recent)
        )
        stats = [s for s in results if s is not None]
        logger.info(
            "Analyzed %d/%d timelines for %s (role %s)",
            len(stats),
            len(recent),
            puuid,
            main_role.value,
        )
        if not stats:
            return None
        return aggregate_timeline_stats(stats, main_role)

    @trace_service
    async def process_match_events(self, match_id: str) -> TimelineEventsReport | None:
        """Fetch one timeline and derive its events and teamfights; None when unavailable."""
        raw = await self.riot_api.get_match_timeline(match_id, self.region)
        if raw is None:
            return None
        return process_timeline_events(MatchTimeline.from_riot(raw, match_id=match_id))
