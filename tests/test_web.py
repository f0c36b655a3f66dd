# ABOUTME: Tests for the ASGI comparison endpoint.
# ABOUTME: Drives the app directly with fake receive/send callables and the fake Open-Meteo backend.

import json
from datetime import date

import httpx
import pytest

from todaylastyear.config import Settings
from todaylastyear.deps import ComparisonDeps
from todaylastyear.web import ComparisonApp, create_app, parse_coordinate


def _app(open_meteo) -> ComparisonApp:
    deps = ComparisonDeps(http_client=open_meteo.client, settings=Settings(), today=lambda: date(2024, 6, 10))
    return ComparisonApp(deps)


async def _call(app, path: str, query: bytes = b"", method: str = "GET") -> tuple[int, dict]:
    sent = []

    async def receive():
        return {"type": "http.request", "body": b"", "more_body": False}

    async def send(message):
        sent.append(message)

    scope = {"type": "http", "method": method, "path": path, "query_string": query}
    await app(scope, receive, send)
    return sent[0]["status"], json.loads(sent[1]["body"])


class TestParseCoordinate:
    def test_parses_query(self):
        """parse_coordinate reads latitude and longitude from the query string.

        Implementation: Parses a raw ASGI query string for London.
        Passing implies: Query values are converted into a Coordinate.
        """
        coord = parse_coordinate(b"latitude=51.5&longitude=-0.12")
        assert (coord.latitude, coord.longitude) == (51.5, -0.12)


class TestComparisonApp:
    @pytest.mark.asyncio
    async def test_returns_today_and_weekly(self, open_meteo):
        """The endpoint returns the today snapshot, summary, and ordered weekly records.

        Implementation: Runs the app against the fake backend with the deps clock pinned to 2024-06-10.
        Passing implies: The web layer exposes a finished run as JSON.
        """
        open_meteo.temps["2023-06-10"] = 15.0

        status, body = await _call(_app(open_meteo), "/api/comparison", b"latitude=51.5&longitude=-0.12")

        assert status == 200
        assert body["today"]["current_temp"] == 18.3
        assert body["summary"] == "Last year it was +15°, which is colder than today by 3°."
        assert [r["date"] for r in body["weekly"]][0] == "2024-06-09"
        assert len(body["weekly"]) == 7
        assert "2023-06-10" in open_meteo.archive_dates()

    @pytest.mark.asyncio
    async def test_invalid_coordinate_is_400(self, open_meteo):
        """A malformed coordinate is answered with 400 before any fetch.

        Implementation: Requests the endpoint with a non-numeric latitude and no longitude.
        Passing implies: Bad input never reaches the remote API.
        """
        status, body = await _call(_app(open_meteo), "/api/comparison", b"latitude=abc")

        assert status == 400
        assert body["error"] == "invalid coordinate"
        assert open_meteo.calls == []

    @pytest.mark.asyncio
    async def test_unknown_path_is_404(self, open_meteo):
        """Anything other than GET /api/comparison is a 404.

        Implementation: POSTs to an unrelated path.
        Passing implies: The app exposes a single route.
        """
        status, _ = await _call(_app(open_meteo), "/api/chat", method="POST")
        assert status == 404


class TestCreateApp:
    def test_builds_app_with_plain_client(self, monkeypatch):
        """create_app wires settings and an httpx client without a retry transport.

        Implementation: Sets an env override and inspects the built app's deps.
        Passing implies: The ASGI entry point is configured from the environment.
        """
        monkeypatch.setenv("TODAYLASTYEAR_TRAILING_DAYS", "5")
        app = create_app()

        assert isinstance(app.deps.http_client, httpx.AsyncClient)
        assert app.deps.http_client.headers["User-Agent"].startswith("todaylastyear/")
        assert app.deps.settings.trailing_days == 5
