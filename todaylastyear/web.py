# ABOUTME: ASGI entry point serving today-vs-last-year comparisons as JSON.
# ABOUTME: GET /api/comparison?latitude=..&longitude=.. runs one aggregation per request.

import json
import logging
from urllib.parse import parse_qs

from pydantic import ValidationError

from todaylastyear.aggregator import Aggregator
from todaylastyear.config import get_settings
from todaylastyear.deps import ComparisonDeps, create_http_client
from todaylastyear.models import Coordinate
from todaylastyear.store import ComparisonStore
from todaylastyear.summary import daily_summary

logger = logging.getLogger(__name__)

_JSON_HEADERS = [[b"content-type", b"application/json"]]


def parse_coordinate(query_string: bytes) -> Coordinate:
    """Build a Coordinate from a raw query string; raises ValidationError if invalid."""
    query = parse_qs(query_string.decode("latin-1"))
    return Coordinate.model_validate(
        {
            "latitude": query.get("latitude", [None])[0],
            "longitude": query.get("longitude", [None])[0],
        }
    )


def build_payload(store: ComparisonStore) -> dict:
    """Serialize a finished run for the presentation layer."""
    weekly = store.weekly.records if store.weekly is not None else ()
    return {
        "today": store.today.model_dump(mode="json"),
        "summary": daily_summary(store.today),
        "weekly": [r.model_dump(mode="json") for r in weekly],
    }


class ComparisonApp:
    """Minimal ASGI app; everything other than the comparison route is a 404."""

    def __init__(self, deps: ComparisonDeps):
        self.deps = deps

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return
        if scope.get("method") != "GET" or scope["path"] != "/api/comparison":
            await self._send_json(send, 404, {"error": "not found"})
            return

        try:
            coordinate = parse_coordinate(scope.get("query_string", b""))
        except ValidationError as e:
            await self._send_json(send, 400, {"error": "invalid coordinate", "detail": e.errors(include_url=False)})
            return

        aggregator = Aggregator(self.deps.http_client, self.deps.settings, today=self.deps.today)
        try:
            store = await aggregator.run(coordinate)
        except Exception:
            logger.exception("Aggregation failed for %s", coordinate)
            await self._send_json(send, 500, {"error": "aggregation failed"})
            return
        await self._send_json(send, 200, build_payload(store))

    async def _send_json(self, send, status: int, body: dict):
        await send({"type": "http.response.start", "status": status, "headers": _JSON_HEADERS})
        await send({"type": "http.response.body", "body": json.dumps(body, default=str).encode()})


def create_app() -> ComparisonApp:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    return ComparisonApp(ComparisonDeps(http_client=create_http_client(), settings=settings))
