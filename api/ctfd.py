"""Serverless function proxying dashboard requests to the CTFd API."""

import json
from http.server import BaseHTTPRequestHandler

from ctfboard.client import build_direct_client
from ctfboard.config import get_config
from ctfboard.logging_config import get_logger
from ctfboard.proxy import endpoint_from_path, proxy_request

logger = get_logger('ctfboard.api.ctfd')


class handler(BaseHTTPRequestHandler):  # noqa: N801
    def do_OPTIONS(self):
        """Handle CORS preflight."""
        self.send_response(200)
        self.send_header('Access-Control-Allow-Origin', '*')
        self.send_header('Access-Control-Allow-Methods', 'GET, OPTIONS')
        self.send_header('Access-Control-Allow-Headers', 'Content-Type, Accept')
        self.send_header('Access-Control-Max-Age', '86400')
        self.send_header('Content-Length', '0')
        self.end_headers()

    def do_GET(self):
        """Forward ?endpoint=<resource> to CTFd with the server-side credentials."""
        endpoint = endpoint_from_path(self.path)
        try:
            client = build_direct_client(get_config())
        except (FileNotFoundError, ValueError) as e:
            logger.error(f'Proxy misconfigured: {e}')
            return self._send_json(500, {'error': 'Server configuration error'})

        status, body = proxy_request(client, endpoint)
        return self._send_json(status, body)

    def _send_json(self, status_code: int, data):
        """Send JSON response with CORS headers."""
        payload = json.dumps(data).encode()
        self.send_response(status_code)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(payload)))
        self.send_header('Access-Control-Allow-Origin', '*')
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        """Route request logs through the ctfboard logger."""
        logger.debug(format % args)
