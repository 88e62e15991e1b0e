"""Placeholder data shown when the CTFd API can't be reached.

Records follow the shapes CTFd returns for each endpoint so the ranking
and dashboard code treat them exactly like live data.
"""

from copy import deepcopy
from typing import Any

from .constants import (
    AWARDS_ENDPOINT,
    CHALLENGES_ENDPOINT,
    SCOREBOARD_ENDPOINT,
    USERS_ENDPOINT,
)

PLACEHOLDER_USERS = [
    {'id': 1, 'name': 'CyberNinja', 'affiliation': 'Red Team', 'score': 850, 'solves': 6},
    {'id': 2, 'name': 'ByteMaster', 'affiliation': 'Blue Team', 'score': 720, 'solves': 5},
    {'id': 3, 'name': 'CodeBreaker', 'affiliation': 'Red Team', 'score': 400, 'solves': 3},
    {'id': 4, 'name': 'HexHunter', 'affiliation': 'Purple Team', 'score': 610, 'solves': 4},
    {'id': 5, 'name': 'PacketSniffer', 'affiliation': 'Blue Team', 'score': 300, 'solves': 2},
    {'id': 6, 'name': 'NullPointer', 'affiliation': 'Green Team', 'score': 250, 'solves': 2},
    {'id': 7, 'name': 'RootKit', 'affiliation': 'Purple Team', 'score': 180, 'solves': 1},
    {'id': 8, 'name': 'StackSmasher', 'affiliation': 'Gold Team', 'score': 500, 'solves': 4},
    {'id': 9, 'name': 'Spectator', 'score': 0, 'solves': 0},
]

PLACEHOLDER_CHALLENGES = [
    {'id': 1, 'name': 'SQL Injection Master', 'category': 'Web', 'value': 250, 'description': '', 'state': 'visible'},
    {'id': 2, 'name': 'XSS Vulnerability', 'category': 'Web', 'value': 200, 'description': '', 'state': 'visible'},
    {'id': 3, 'name': 'Buffer Overflow', 'category': 'Pwn', 'value': 300, 'description': '', 'state': 'visible'},
    {'id': 4, 'name': 'Crypto Challenge', 'category': 'Crypto', 'value': 180, 'description': '', 'state': 'visible'},
]

PLACEHOLDER_AWARDS = [
    {
        'id': 1,
        'name': 'First Blood',
        'description': 'First team to solve a challenge',
        'category': 'bonus',
        'value': 50,
        'team_id': 1,
        'user_id': 1,
    },
]

FALLBACK_DATA: dict[str, list[dict[str, Any]]] = {
    USERS_ENDPOINT: PLACEHOLDER_USERS,
    SCOREBOARD_ENDPOINT: [],
    CHALLENGES_ENDPOINT: PLACEHOLDER_CHALLENGES,
    AWARDS_ENDPOINT: PLACEHOLDER_AWARDS,
}


def get_fallback_data(endpoint: str) -> list[dict[str, Any]] | None:
    """Return a fresh copy of the placeholder payload, or None if there is none."""
    if endpoint not in FALLBACK_DATA:
        return None
    return deepcopy(FALLBACK_DATA[endpoint])
