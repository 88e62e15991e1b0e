"""Pydantic schemas for CTFd payloads and dashboard configuration."""

from pydantic import AliasChoices, BaseModel, Field, field_validator

from .constants import AUTH_COOKIE, AUTH_NONE, AUTH_TOKEN


class Participant(BaseModel):
    """A user record from the CTFd /users endpoint."""

    id: int
    name: str
    email: str | None = None
    affiliation: str | None = None
    score: int | float | None = None
    solves: int | None = None

    class Config:
        extra = 'allow'


class TeamStanding(BaseModel):
    """
    A ranked team.

    Built either from a CTFd /scoreboard entry (which calls the id
    ``account_id`` and the place ``pos``) or by grouping participants
    on their affiliation.
    """

    id: int = Field(..., validation_alias=AliasChoices('id', 'account_id'))
    name: str
    score: int | float = 0
    solves: int = 0
    place: int | None = Field(None, validation_alias=AliasChoices('place', 'pos'))
    members: list[Participant] = Field(default_factory=list)

    class Config:
        extra = 'allow'


class DashboardConfig(BaseModel):
    """Dashboard configuration settings."""

    base_url: str = Field(..., min_length=1)
    proxy_url: str | None = None
    auth_mode: str | None = Field(None, pattern=r'^(token|cookie|none)$')
    auth_token: str | None = None
    session_cookie: str | None = None
    poll_interval: float = Field(30.0, gt=0)
    request_timeout: float | None = Field(None, gt=0)
    use_fallback: bool = True

    @field_validator('base_url', 'proxy_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        """Endpoints are appended with a leading slash."""
        if v is None:
            return v
        return v.rstrip('/')

    def resolved_auth_mode(self) -> str:
        """Auth mode to use, preferring a token over a cookie when unset."""
        if self.auth_mode:
            return self.auth_mode
        if self.auth_token:
            return AUTH_TOKEN
        if self.session_cookie:
            return AUTH_COOKIE
        return AUTH_NONE

    class Config:
        extra = 'forbid'
