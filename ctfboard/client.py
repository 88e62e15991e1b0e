"""CTFd REST API access with normalized results."""

import logging
import re
from typing import Any

import requests

from .constants import (
    AUTH_COOKIE,
    AUTH_NONE,
    AUTH_TOKEN,
    AWARDS_ENDPOINT,
    CHALLENGES_ENDPOINT,
    PERMISSION_KEYWORD,
    SCOREBOARD_ENDPOINT,
    STATIC_ENDPOINTS,
    TEAM_ENDPOINT_PREFIX,
    USERS_ENDPOINT,
)
from .fallback import get_fallback_data
from .models import Failure, FetchResult, Success
from .schemas import DashboardConfig

logger = logging.getLogger('ctfboard.client')

TEAM_ENDPOINT_RE = re.compile(r'^/teams/\d+$')


def resolve_endpoint(endpoint: str) -> str:
    """
    Check that an endpoint is one of the resources the dashboard reads.

    Raises:
        ValueError: For anything other than /users, /scoreboard,
            /challenges, /awards or /teams/<id>
    """
    endpoint = (endpoint or '').strip()
    if endpoint in STATIC_ENDPOINTS or TEAM_ENDPOINT_RE.match(endpoint):
        return endpoint
    raise ValueError(f'Unsupported CTFd endpoint: {endpoint!r}')


def error_message(body: Any) -> str | None:
    """Pull CTFd's ``message`` (or a proxy's ``error``) out of a JSON body."""
    if not isinstance(body, dict):
        return None
    message = body.get('message') or body.get('error')
    if isinstance(message, str) and message:
        return message
    return None


def parse_response(response: requests.Response, endpoint: str) -> FetchResult:
    """
    Turn an HTTP response into a Success or Failure.

    CTFd wraps payloads as ``{"success": true, "data": ...}``; the
    envelope is removed so callers only ever see the payload.
    """
    try:
        body = response.json()
    except ValueError:
        if not response.ok:
            return Failure(f'HTTP error! status: {response.status_code}', status=response.status_code)
        return Failure(f'Invalid JSON from {endpoint}', status=response.status_code)

    message = error_message(body)

    if not response.ok:
        return Failure(
            message or f'HTTP error! status: {response.status_code}',
            status=response.status_code,
        )

    if message and PERMISSION_KEYWORD in message.lower():
        return Failure(message, status=response.status_code)

    if isinstance(body, dict) and 'success' in body:
        if not body['success']:
            return Failure(message or f'CTFd reported failure for {endpoint}', status=response.status_code)
        if 'data' in body:
            return Success(body['data'])

    return Success(body)


class BaseClient:
    """Named accessors shared by every client; subclasses implement fetch()."""

    def fetch(self, endpoint: str) -> FetchResult:
        raise NotImplementedError

    def get_users(self) -> FetchResult:
        return self.fetch(USERS_ENDPOINT)

    def get_scoreboard(self) -> FetchResult:
        return self.fetch(SCOREBOARD_ENDPOINT)

    def get_challenges(self) -> FetchResult:
        return self.fetch(CHALLENGES_ENDPOINT)

    def get_awards(self) -> FetchResult:
        return self.fetch(AWARDS_ENDPOINT)

    def get_team(self, team_id: int) -> FetchResult:
        return self.fetch(f'{TEAM_ENDPOINT_PREFIX}{int(team_id)}')


class CTFdClient(BaseClient):
    """
    Reads the CTFd API directly.

    Each call is a single GET: no retries and no backoff. ``timeout`` is
    passed straight to requests, so None waits indefinitely.
    """

    def __init__(
        self,
        base_url: str,
        auth_mode: str = AUTH_NONE,
        token: str | None = None,
        session_cookie: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }

        if auth_mode == AUTH_TOKEN:
            if not token:
                raise ValueError('Token auth selected but no token configured')
            self.headers['Authorization'] = f'Token {token}'
        elif auth_mode == AUTH_COOKIE:
            if not session_cookie:
                raise ValueError('Cookie auth selected but no session cookie configured')
            self.headers['Cookie'] = f'session={session_cookie}'

    def _request_args(self, endpoint: str) -> tuple[str, dict[str, str] | None]:
        """URL and query parameters for an endpoint."""
        return f'{self.base_url}{endpoint}', None

    def request(self, endpoint: str) -> requests.Response:
        """Send the raw GET. Transport errors propagate as requests exceptions."""
        endpoint = resolve_endpoint(endpoint)
        url, params = self._request_args(endpoint)
        logger.debug(f'GET {url} params={params}')
        return self.session.get(url, params=params, headers=self.headers, timeout=self.timeout)

    def fetch(self, endpoint: str) -> FetchResult:
        endpoint = resolve_endpoint(endpoint)
        try:
            response = self.request(endpoint)
        except requests.RequestException as e:
            logger.error(f'Error fetching {endpoint}: {e}')
            return Failure(str(e) or e.__class__.__name__)

        result = parse_response(response, endpoint)
        if not result.ok:
            logger.warning(f'Fetching {endpoint} failed: {result.error}')
        return result


class ProxyClient(CTFdClient):
    """Reads the CTFd API through the local ``?endpoint=`` proxy."""

    def __init__(
        self,
        proxy_url: str,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        # The proxy holds the credentials
        super().__init__(proxy_url, timeout=timeout, session=session)

    def _request_args(self, endpoint: str) -> tuple[str, dict[str, str] | None]:
        return self.base_url, {'endpoint': endpoint}


class FallbackClient(BaseClient):
    """
    Wraps a client and substitutes placeholder data for failed calls.

    Endpoints with an entry in ``FALLBACK_DATA`` always come back as a
    Success. Others (/teams/<id>) keep their Failure.
    """

    def __init__(self, client: BaseClient):
        self.client = client

    def fetch(self, endpoint: str) -> FetchResult:
        result = self.client.fetch(endpoint)
        if result.ok:
            return result

        placeholder = get_fallback_data(endpoint)
        if placeholder is None:
            return result

        logger.warning(f'Using placeholder data for {endpoint} ({result.error})')
        return Success(placeholder)


def build_direct_client(config: DashboardConfig, session: requests.Session | None = None) -> CTFdClient:
    """Client that talks to the upstream API with the configured credentials."""
    return CTFdClient(
        config.base_url,
        auth_mode=config.resolved_auth_mode(),
        token=config.auth_token,
        session_cookie=config.session_cookie,
        timeout=config.request_timeout,
        session=session,
    )


def build_client(config: DashboardConfig, session: requests.Session | None = None) -> BaseClient:
    """
    Build the client the dashboard polls with.

    Goes through the proxy when ``proxy_url`` is set, and wraps the result
    in a FallbackClient unless ``use_fallback`` is off.
    """
    if config.proxy_url:
        client: BaseClient = ProxyClient(config.proxy_url, timeout=config.request_timeout, session=session)
    else:
        client = build_direct_client(config, session=session)

    if config.use_fallback:
        return FallbackClient(client)
    return client
