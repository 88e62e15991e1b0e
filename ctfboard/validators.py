"""Sanity checks for ranked standings."""

from .schemas import TeamStanding


def validate_places(teams: list[TeamStanding]) -> list[str]:
    """
    Check that places run 1..N with no gaps or duplicates.

    Args:
        teams: Ranked teams in display order

    Returns:
        List of problems (empty if the places are dense)
    """
    errors = []

    missing = [team.name for team in teams if team.place is None]
    if missing:
        errors.append(f'Teams without a place: {", ".join(missing)}')

    places = [team.place for team in teams if team.place is not None]

    seen = set()
    duplicates = set()
    for place in places:
        if place in seen:
            duplicates.add(place)
        seen.add(place)

    if duplicates:
        errors.append(f'Duplicate places: {", ".join(str(p) for p in sorted(duplicates))}')

    expected = set(range(1, len(teams) + 1))
    gaps = expected - seen
    if gaps and not missing:
        errors.append(f'Places are not dense, missing: {", ".join(str(p) for p in sorted(gaps))}')

    return errors


def validate_team_score(team: TeamStanding) -> list[str]:
    """
    Check that a team's totals are plausible.

    Sanity checks:
    - No negative score or solve count
    - For grouped teams, totals match the sum over members
    """
    warnings = []

    if team.score < 0:
        warnings.append(f'{team.name} has a negative score ({team.score})')
    if team.solves < 0:
        warnings.append(f'{team.name} has a negative solve count ({team.solves})')

    # Scoreboard members come from CTFd without solve counts, so only
    # compare totals when every member carries both numbers
    if team.members and all(m.score is not None and m.solves is not None for m in team.members):
        member_score = sum(m.score for m in team.members)
        member_solves = sum(m.solves for m in team.members)
        if member_score != team.score:
            warnings.append(
                f'{team.name} score ({team.score}) != member total ({member_score})'
            )
        if member_solves != team.solves:
            warnings.append(
                f'{team.name} solves ({team.solves}) != member total ({member_solves})'
            )

    return warnings


def validate_standings(teams: list[TeamStanding]) -> list[str]:
    """Run every check over a ranked list and collect the messages."""
    messages = validate_places(teams)
    for team in teams:
        messages.extend(validate_team_score(team))
    return messages
