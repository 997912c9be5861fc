"""Browse endpoint: filtered listings for the directory, marketplace and inspection board.

GET /api/browse?collection=professionals&q=bondi&lat=-33.87&lng=151.21&radius_km=10&user_type=buyers_agent

Any other query parameter is an exact-match filter on that field; ``min_<field>``
sets a numeric minimum. The caller's bearer token is forwarded to Supabase.
"""

from http.server import BaseHTTPRequestHandler
from typing import Any, Optional
from urllib.parse import parse_qs, urlparse
import asyncio
import json

from pydantic import ValidationError

from src.models.locatable import Coordinates
from src.services.browse import SURFACES, browse
from src.services.list_filter import ListQuery
from src.services.supabase_client import SessionProvider, StaticSessionProvider
from src.utils.errors import MarketplaceError
from src.utils.logging import correlation_context, get_structured_logger, log_context
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
logger = get_structured_logger(__name__)

_RESERVED = {"collection", "q", "lat", "lng", "radius_km", "limit", "offset"}


def parse_list_query(params: dict[str, str]) -> ListQuery:
    """Build a ListQuery from flat query-string parameters. Raises ValueError."""
    lat, lng = params.get("lat"), params.get("lng")
    center = None
    if lat is not None or lng is not None:
        if lat is None or lng is None:
            raise ValueError("lat and lng must be given together")
        center = Coordinates(lat=float(lat), lng=float(lng))

    categorical: dict[str, str] = {}
    minimums: dict[str, float] = {}
    for key, value in params.items():
        if key in _RESERVED:
            continue
        if key.startswith("min_"):
            minimums[key[len("min_"):]] = float(value)
        else:
            categorical[key] = value

    data: dict[str, Any] = {
        "text": params.get("q", ""),
        "categorical": categorical,
        "minimums": minimums,
        "center": center,
    }
    if "radius_km" in params:
        data["radius_km"] = float(params["radius_km"])
    return ListQuery(**data)


def session_from_header(authorization: Optional[str]) -> Optional[SessionProvider]:
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[len("bearer "):].strip()
        if token:
            return StaticSessionProvider(token)
    return None


def serialize(entity) -> dict:
    data = entity.model_dump(mode="json")
    data["distance_km"] = round(entity.distance_km, 2) if entity.distance_km is not None else None
    return data


class handler(BaseHTTPRequestHandler):
    """Vercel serverless function handler for browse requests."""

    def _send_json(self, status: int, payload: Any, correlation_id: Optional[str] = None) -> None:
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        if correlation_id:
            self.send_header(LoggingConfig.LOG_CORRELATION_ID_HEADER, correlation_id)
        self.end_headers()
        self.wfile.write(json.dumps(payload).encode('utf-8'))

    def do_GET(self):
        """Handle GET request."""
        incoming_id = self.headers.get(LoggingConfig.LOG_CORRELATION_ID_HEADER)
        with correlation_context(incoming_id) as correlation_id:
            params = {k: v[0] for k, v in parse_qs(urlparse(self.path).query).items()}
            surface = SURFACES.get(params.get("collection", ""))
            if surface is None:
                self._send_json(
                    400, {"error": f"collection must be one of: {', '.join(SURFACES)}"}, correlation_id
                )
                return

            with log_context(surface=surface.name):
                status, payload = self._browse(surface, params)
            self._send_json(status, payload, correlation_id)

    def _browse(self, surface, params: dict[str, str]) -> tuple[int, dict]:
        try:
            query = parse_list_query(params)
            limit = int(params["limit"]) if "limit" in params else None
            offset = int(params.get("offset", "0"))
        except (ValueError, ValidationError) as e:
            logger.info("Rejected browse query", error=str(e))
            return 400, {"error": str(e)}

        session = session_from_header(self.headers.get("Authorization"))
        try:
            results = asyncio.run(browse(surface, query, session, limit=limit, offset=offset))
        except ValueError as e:
            return 400, {"error": str(e)}
        except MarketplaceError as e:
            logger.error("Browse failed", error=str(e))
            return 500, {"error": e.user_message}

        return 200, {
            "collection": surface.name,
            "count": len(results),
            "results": [serialize(r) for r in results],
        }
