from .models import Success, Failure, FetchResult, LeaderboardSnapshot
from .schemas import Participant, TeamStanding, DashboardConfig
from .client import (
    CTFdClient,
    ProxyClient,
    FallbackClient,
    build_client,
    build_direct_client,
    resolve_endpoint,
)
from .ranking import (
    compute_ranked_teams,
    build_teams_from_participants,
    group_by_affiliation,
    assign_places,
    top_band,
    mid_band,
    podium_slots,
)
from .dashboard import (
    LeaderboardUnavailable,
    teams_from_results,
    get_all_teams,
    get_top3_teams,
    get_teams_ranked_4_to_13,
    get_all_challenges,
    get_awards_data,
    get_team_details,
)
from .poller import PollController, PollState
from .config import get_config, load_config

__all__ = [
    # Models
    'Success',
    'Failure',
    'FetchResult',
    'LeaderboardSnapshot',
    'Participant',
    'TeamStanding',
    'DashboardConfig',
    # Data access
    'CTFdClient',
    'ProxyClient',
    'FallbackClient',
    'build_client',
    'build_direct_client',
    'resolve_endpoint',
    # Ranking
    'compute_ranked_teams',
    'build_teams_from_participants',
    'group_by_affiliation',
    'assign_places',
    'top_band',
    'mid_band',
    'podium_slots',
    # Dashboard services
    'LeaderboardUnavailable',
    'teams_from_results',
    'get_all_teams',
    'get_top3_teams',
    'get_teams_ranked_4_to_13',
    'get_all_challenges',
    'get_awards_data',
    'get_team_details',
    # Polling
    'PollController',
    'PollState',
    # Config
    'get_config',
    'load_config',
]
