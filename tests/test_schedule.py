"""Schedule fetcher over a fake session: URL shape, parsing, failures as ScheduleFetchError."""

import pytest
import requests

from fanstatsengine.config import Config
from fanstatsengine.data.errors import ScheduleFetchError
from fanstatsengine.data.schedule import HttpScheduleFetcher, fetch_team_schedule, schedule_url


class _Resp:
    def __init__(self, payload=None, status=200, bad_json=False):
        self._payload = payload
        self.status_code = status
        self._bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


class _Session:
    def __init__(self, resp):
        self.resp = resp
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append((url, timeout))
        if isinstance(self.resp, Exception):
            raise self.resp
        return self.resp


PAYLOAD = {"games": [{
    "id": 2024020100, "gameState": "OFF", "startTimeUTC": "2024-11-01T23:00:00Z",
    "homeTeam": {"abbrev": "TOR", "score": 4}, "awayTeam": {"abbrev": "MTL", "score": 1},
}]}


def test_schedule_url_uses_compact_season():
    url = schedule_url("TOR", "2024-2025", Config(api_base="https://example.test/v1"))
    assert url == "https://example.test/v1/club-schedule-season/TOR/20242025"


def test_fetch_parses_games_and_passes_timeout():
    s = _Session(_Resp(PAYLOAD))
    games = fetch_team_schedule("TOR", "2024-2025", session=s, config=Config(request_timeout=5))
    assert [g.game_id for g in games] == ["2024020100"]
    assert s.urls[0][1] == 5


@pytest.mark.parametrize("resp", [
    _Resp(status=503),
    _Resp(bad_json=True),
    requests.ConnectionError("down"),
])
def test_failures_raise_schedule_fetch_error(resp):
    with pytest.raises(ScheduleFetchError) as exc:
        fetch_team_schedule("TOR", "2024-2025", session=_Session(resp))
    assert exc.value.team == "TOR"
    assert exc.value.season == "2024-2025"


def test_http_fetcher_reuses_session():
    s = _Session(_Resp(PAYLOAD))
    fetch = HttpScheduleFetcher(session=s)
    fetch("TOR", "2024-2025")
    fetch("MTL", "2024-2025")
    assert [u.rsplit("/", 2)[1] for u, _ in s.urls] == ["TOR", "MTL"]
