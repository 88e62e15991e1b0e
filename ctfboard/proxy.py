"""Same-origin proxy that forwards ``?endpoint=`` requests to CTFd."""

import logging
from typing import Any
from urllib.parse import parse_qs, urlparse

import requests

from .client import CTFdClient, error_message, resolve_endpoint
from .constants import DEFAULT_PROXY_ENDPOINT, PROXY_ERROR_MESSAGE

logger = logging.getLogger('ctfboard.proxy')


def endpoint_from_path(path: str) -> str:
    """Read the ``endpoint`` query parameter, defaulting to /users."""
    query = parse_qs(urlparse(path).query)
    values = query.get('endpoint')
    return values[0] if values and values[0] else DEFAULT_PROXY_ENDPOINT


def proxy_request(client: CTFdClient, endpoint: str) -> tuple[int, Any]:
    """
    Forward one request upstream and decide what to relay.

    Successful bodies are passed through untouched so callers still see
    the CTFd envelope. Upstream errors keep their status code.

    Returns:
        Tuple of (status_code, json_body)
    """
    try:
        endpoint = resolve_endpoint(endpoint)
    except ValueError as e:
        return 400, {'success': False, 'error': str(e)}

    try:
        response = client.request(endpoint)
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f'API error for {endpoint}: {e}')
        return 500, {'error': PROXY_ERROR_MESSAGE}

    if not response.ok:
        return response.status_code, {
            'success': False,
            'error': error_message(data) or f'HTTP error! status: {response.status_code}',
        }

    return 200, data
