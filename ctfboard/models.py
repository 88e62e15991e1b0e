"""Data models for the CTF leaderboard."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Union

from .schemas import TeamStanding


@dataclass(frozen=True)
class Success:
    """A fetch that returned a usable payload."""
    data: Any
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Failure:
    """A fetch that failed, with a human-readable reason."""
    error: str
    status: int | None = None  # upstream HTTP status when there was one
    ok: ClassVar[bool] = False


FetchResult = Union[Success, Failure]


@dataclass(frozen=True)
class LeaderboardSnapshot:
    """Everything the dashboard shows after one poll cycle."""
    teams: list[TeamStanding] = field(default_factory=list)
    top3_teams: list[TeamStanding] = field(default_factory=list)
    teams_ranked_4_to_13: list[TeamStanding] = field(default_factory=list)
    challenges: list[Any] = field(default_factory=list)
    awards: list[Any] = field(default_factory=list)
    error: str | None = None
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_solves(self) -> int:
        return sum(team.solves for team in self.teams)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape the dashboard page consumes."""
        return {
            'top3Teams': [team.model_dump() for team in self.top3_teams],
            'teamsRanked4to13': [team.model_dump() for team in self.teams_ranked_4_to_13],
            'challenges': self.challenges,
            'awards': self.awards,
            'teamCount': len(self.teams),
            'totalSolves': self.total_solves,
            'error': self.error,
            'fetchedAt': self.fetched_at.isoformat(),
        }
