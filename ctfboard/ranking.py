"""Team ranking: group participants, sort, assign places and slice bands."""

from typing import Any, Iterable, Optional

from .constants import (
    MID_BAND_END,
    MID_BAND_START,
    TOP_BAND_SIZE,
    UNKNOWN_TEAM_NAME,
)
from .schemas import Participant, TeamStanding


def _as_participants(records: Iterable[Any]) -> list[Participant]:
    return [r if isinstance(r, Participant) else Participant.model_validate(r) for r in records]


def _as_standings(records: Iterable[Any]) -> list[TeamStanding]:
    return [r if isinstance(r, TeamStanding) else TeamStanding.model_validate(r) for r in records]


def format_team_name(name: Optional[str]) -> str:
    return name or UNKNOWN_TEAM_NAME


def calculate_team_score(members: Iterable[Participant]) -> int | float:
    """Sum member scores, counting a missing score as 0."""
    return sum(member.score or 0 for member in members)


def calculate_team_solves(members: Iterable[Participant]) -> int:
    """Sum member solves, counting a missing count as 0."""
    return sum(member.solves or 0 for member in members)


def group_by_affiliation(participants: Iterable[Participant]) -> dict[str, list[Participant]]:
    """
    Partition participants by affiliation.

    Participants without an affiliation are left out. Groups and their
    members keep the order in which they were first seen.
    """
    groups: dict[str, list[Participant]] = {}
    for participant in participants:
        if not participant.affiliation:
            continue
        groups.setdefault(participant.affiliation, []).append(participant)
    return groups


def assign_places(teams: Iterable[TeamStanding]) -> list[TeamStanding]:
    """
    Sort teams by score (highest first) and number them 1..N.

    The sort is stable, so tied teams keep their input order. The id is
    set to the place as well. Returns copies; the input is not modified.
    """
    ordered = sorted(teams, key=lambda team: team.score, reverse=True)
    return [
        team.model_copy(update={'place': position, 'id': position})
        for position, team in enumerate(ordered, 1)
    ]


def build_teams_from_participants(participants: Iterable[Any]) -> list[TeamStanding]:
    """
    Construct ranked teams from individual participants.

    Used when the platform has no native team scoreboard: each affiliation
    becomes a team whose score and solves are the sums over its members.

    Args:
        participants: Participant models or raw CTFd user dicts

    Returns:
        Teams ordered by score with dense places

    Raises:
        ValueError: If a participant record is malformed
    """
    groups = group_by_affiliation(_as_participants(participants))

    teams = [
        TeamStanding(
            id=index,
            name=format_team_name(affiliation),
            score=calculate_team_score(members),
            solves=calculate_team_solves(members),
            place=index,
            members=members,
        )
        for index, (affiliation, members) in enumerate(groups.items(), 1)
    ]

    return assign_places(teams)


def compute_ranked_teams(
    participants: Optional[Iterable[Any]] = None,
    scoreboard: Optional[Iterable[Any]] = None,
) -> list[TeamStanding]:
    """
    Produce the ranked team list from whichever source is available.

    A non-empty scoreboard is already ranked upstream and is used as-is,
    in its own order and with its own places. Otherwise teams are built
    by grouping participants on their affiliation.

    Raises:
        ValueError: If a record is malformed
    """
    entries = list(scoreboard or [])
    if entries:
        return _as_standings(entries)

    return build_teams_from_participants(participants or [])


def top_band(teams: list[TeamStanding]) -> list[TeamStanding]:
    """Ranks 1-3."""
    return teams[:TOP_BAND_SIZE]


def mid_band(teams: list[TeamStanding]) -> list[TeamStanding]:
    """Ranks 4-13; shorter when there are fewer teams."""
    return teams[MID_BAND_START:MID_BAND_END]


def podium_slots(teams: list[TeamStanding]) -> list[Optional[TeamStanding]]:
    """The top band padded with None so there are always three podium slots."""
    podium: list[Optional[TeamStanding]] = list(top_band(teams))
    return podium + [None] * (TOP_BAND_SIZE - len(podium))
