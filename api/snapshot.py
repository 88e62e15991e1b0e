"""Serverless function returning one freshly polled leaderboard snapshot."""

import json
from http.server import BaseHTTPRequestHandler

from ctfboard.client import build_client
from ctfboard.config import get_config
from ctfboard.logging_config import get_logger
from ctfboard.poller import PollController

logger = get_logger('ctfboard.api.snapshot')


class handler(BaseHTTPRequestHandler):  # noqa: N801
    def do_GET(self):
        """Run a single poll cycle and return the dashboard data."""
        try:
            config = get_config()
            client = build_client(config)
        except (FileNotFoundError, ValueError) as e:
            logger.error(f'Snapshot endpoint misconfigured: {e}')
            return self._send_json(500, {'error': 'Server configuration error'})

        snapshot = PollController(client, interval=config.poll_interval).refetch()
        return self._send_json(200, snapshot.to_dict())

    def _send_json(self, status_code: int, data: dict):
        """Send JSON response with CORS headers."""
        payload = json.dumps(data).encode()
        self.send_response(status_code)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(payload)))
        self.send_header('Access-Control-Allow-Origin', '*')
        self.send_header('Cache-Control', 'no-store')
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        logger.debug(format % args)
