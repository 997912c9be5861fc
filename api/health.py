"""Health check endpoint.

Reports whether the function can reach configuration, without calling Supabase.
"""

from http.server import BaseHTTPRequestHandler
import json

from src.utils.app_config import AppConfig
from src.utils.errors import ConfigurationError
from src.utils.logging import correlation_context
from src.utils.logging_config import SERVICE_NAME, LoggingConfig


def health_payload() -> dict:
    try:
        AppConfig.supabase_credentials()
        configured = True
    except ConfigurationError:
        configured = False
    return {
        "status": "ok" if configured else "degraded",
        "service": SERVICE_NAME,
        "supabase_configured": configured,
    }


class handler(BaseHTTPRequestHandler):
    """Health check handler for Vercel serverless function."""

    def do_GET(self):
        """Handle GET request."""
        incoming_id = self.headers.get(LoggingConfig.LOG_CORRELATION_ID_HEADER)
        with correlation_context(incoming_id) as correlation_id:
            self.send_response(200)
            self.send_header('Content-Type', 'application/json')
            self.send_header(LoggingConfig.LOG_CORRELATION_ID_HEADER, correlation_id)
            self.end_headers()
            self.wfile.write(json.dumps(health_payload()).encode('utf-8'))

    def do_POST(self):
        """Handle POST request (same as GET for health check)."""
        self.do_GET()
