"""Service layer implementing the timeline analytics.

Event processing, frame analysis and aggregation are pure computations over
data already in memory. Role assignment, the rate provider and the timeline
analysis service are async and reach the cache, Riot API and rate sources
through ports.
"""

from riftlens.core.services.champion_role_rates import ChampionRoleRateProvider
from riftlens.core.services.role_assignment import assign_live_game_roles, assign_team_roles
from riftlens.core.services.timeline_aggregator import aggregate_timeline_stats
from riftlens.core.services.timeline_analysis_service import TimelineAnalysisService
from riftlens.core.services.timeline_event_processor import process_timeline_events
from riftlens.core.services.timeline_frame_analyzer import analyze_single_timeline

__all__ = [
    "ChampionRoleRateProvider",
    "assign_live_game_roles",
    "assign_team_roles",
    "aggregate_timeline_stats",
    "TimelineAnalysisService",
    "process_timeline_events",
    "analyze_single_timeline",
]
