"""
Default season-schedule fetcher (club-schedule-season endpoint) over requests.

The reconciler only depends on the callable shape
fetch(team_abbrev, season_id) -> List[ScheduledGame]; this module provides the HTTP one.
"""

import logging
from typing import List

from fanstatsengine.config import Config, DEFAULT_CONFIG, api_season
from fanstatsengine.data.errors import ScheduleFetchError
from fanstatsengine.data.games import ScheduledGame, parse_schedule

logger = logging.getLogger(__name__)

USER_AGENT = "fanstatsengine/0.1"


def session_with_retries():
    """requests.Session that retries connection errors and 429/5xx with backoff."""
    import requests  # noqa: PLC0415
    from requests.adapters import HTTPAdapter  # noqa: PLC0415
    from urllib3.util.retry import Retry  # noqa: PLC0415

    s = requests.Session()
    retry = Retry(total=3, connect=3, read=3, backoff_factor=0.4,
                  status_forcelist=[429, 500, 502, 503, 504])
    s.mount("https://", HTTPAdapter(max_retries=retry))
    s.headers.update({"User-Agent": USER_AGENT})
    return s


def schedule_url(team: str, season: str, config: Config = DEFAULT_CONFIG) -> str:
    """URL for one team's season schedule; season accepts "2024-2025" or "20242025"."""
    return f"{config.api_base}/club-schedule-season/{team}/{api_season(season)}"


def fetch_team_schedule(
    team: str,
    season: str,
    *,
    session=None,
    config: Config = DEFAULT_CONFIG,
) -> List[ScheduledGame]:
    """
    GET and parse one team's season schedule.
    Raises ScheduleFetchError on transport errors, non-2xx responses or undecodable JSON.
    """
    import requests  # noqa: PLC0415

    sess = session or session_with_retries()
    url = schedule_url(team, season, config)
    logger.info("Fetching schedule for %s (%s)", team, season)
    try:
        r = sess.get(url, timeout=config.request_timeout)
        r.raise_for_status()
        payload = r.json()
    except (requests.RequestException, ValueError) as e:
        raise ScheduleFetchError(f"Schedule fetch failed for {team}: {e}", team=team, season=season) from e
    return parse_schedule(payload)


class HttpScheduleFetcher:
    """Callable fetcher sharing one retrying session across teams."""

    def __init__(self, config: Config = DEFAULT_CONFIG, session=None) -> None:
        self.config = config
        self._session = session

    def __call__(self, team: str, season: str) -> List[ScheduledGame]:
        if self._session is None:
            self._session = session_with_retries()
        return fetch_team_schedule(team, season, session=self._session, config=self.config)
