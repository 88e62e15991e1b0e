"""Dashboard data services built on the client and the ranking logic."""

import logging
from typing import Any

from .client import BaseClient
from .constants import LEADERBOARD_ERROR_MESSAGE, PERMISSION_KEYWORD
from .models import FetchResult
from .ranking import compute_ranked_teams, mid_band, top_band
from .schemas import TeamStanding

logger = logging.getLogger('ctfboard.dashboard')


class LeaderboardUnavailable(Exception):
    """Neither the scoreboard nor the user list produced a usable ranking."""


def _scoreboard_teams(scoreboard: FetchResult) -> list[TeamStanding] | None:
    """Teams straight from a non-empty scoreboard, or None to fall back to users."""
    if not (scoreboard.ok and isinstance(scoreboard.data, list) and scoreboard.data):
        return None
    try:
        return compute_ranked_teams(scoreboard=scoreboard.data)
    except ValueError as e:
        logger.warning(f'Malformed scoreboard, falling back to users: {e}')
        return None


def _user_teams(users: FetchResult) -> list[TeamStanding]:
    if not users.ok:
        raise LeaderboardUnavailable(
            f'{LEADERBOARD_ERROR_MESSAGE}: failed to fetch users data ({users.error})'
        )

    if not isinstance(users.data, list):
        raise LeaderboardUnavailable(
            f'{LEADERBOARD_ERROR_MESSAGE}: expected a list of users, got {type(users.data).__name__}'
        )

    try:
        return compute_ranked_teams(participants=users.data)
    except ValueError as e:
        raise LeaderboardUnavailable(f'{LEADERBOARD_ERROR_MESSAGE}: malformed user data') from e


def teams_from_results(scoreboard: FetchResult, users: FetchResult) -> list[TeamStanding]:
    """
    Rank teams from already-fetched scoreboard and user results.

    The scoreboard wins whenever it holds at least one entry. Otherwise
    the user list is grouped by affiliation.

    Raises:
        LeaderboardUnavailable: If the scoreboard is empty or failed and
            the user list failed, isn't a list, or holds malformed records
    """
    teams = _scoreboard_teams(scoreboard)
    if teams is not None:
        return teams
    return _user_teams(users)


def get_all_teams(client: BaseClient) -> list[TeamStanding]:
    """Fetch and rank all teams, asking for users only if the scoreboard is empty."""
    teams = _scoreboard_teams(client.get_scoreboard())
    if teams is not None:
        return teams
    return _user_teams(client.get_users())


def get_top3_teams(client: BaseClient) -> list[TeamStanding]:
    return top_band(get_all_teams(client))


def get_teams_ranked_4_to_13(client: BaseClient) -> list[TeamStanding]:
    return mid_band(get_all_teams(client))


def collection_from_result(result: FetchResult, label: str) -> list[Any]:
    """
    Unwrap a list payload, degrading to an empty list on any failure.

    Challenges and awards are decoration on the dashboard, so losing them
    must never block the leaderboard.
    """
    if not result.ok:
        if PERMISSION_KEYWORD in result.error.lower():
            logger.warning(f'{label.capitalize()} endpoint requires higher permissions. Returning empty list.')
        else:
            logger.warning(f'Failed to fetch {label}: {result.error}')
        return []

    if not isinstance(result.data, list):
        logger.warning(f'Unexpected {label} payload ({type(result.data).__name__}). Returning empty list.')
        return []

    return result.data


def get_all_challenges(client: BaseClient) -> list[Any]:
    return collection_from_result(client.get_challenges(), 'challenges')


def get_awards_data(client: BaseClient) -> list[Any]:
    return collection_from_result(client.get_awards(), 'awards')


def get_team_details(client: BaseClient, team_id: int) -> FetchResult:
    """Raw /teams/<id> result; there is no placeholder for it."""
    return client.get_team(team_id)
