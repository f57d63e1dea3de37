# sportradar_proxy/clients/sportradar.py
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..core.config import SOCCER_PATH
from ..core.errors import ProxyError
from ..services.proxy import ProxyResult, ProxyService

logger = logging.getLogger(__name__)


def extract_numeric_id(urn_or_id: str) -> str:
    """'sr:match:123' -> '123'; plain ids pass through."""
    return urn_or_id.rsplit(":", 1)[-1] if ":" in urn_or_id else urn_or_id


class SportradarClient:
    """
    Thin, uniform wrapper over the Sportradar Soccer v4 feed, served
    through the caching proxy.

      - competitions:  GET /competitions.json
      - live:          GET /sport_events/live/summaries.json
      - match:         GET /sport_events/{id}/summary.json
      - schedule:      GET /seasons/{id}/schedule.json
      - standings:     GET /seasons/{id}/standings.json
      - daily:         GET /schedules/{YYYY-MM-DD}/summaries.json
      - competitor:    GET /competitors/{id}/profile.json
    """

    def __init__(self, proxy: ProxyService, base_path: str = SOCCER_PATH):
        self._proxy = proxy
        self._base_path = "/" + base_path.strip("/")

    def _get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> ProxyResult:
        return self._proxy.handle(f"{self._base_path}{path}", params)

    def competitions(self) -> ProxyResult:
        return self._get("/competitions.json")

    def live_summaries(self) -> ProxyResult:
        return self._get("/sport_events/live/summaries.json")

    def match_summary(self, match_id: str) -> ProxyResult:
        return self._get(f"/sport_events/{extract_numeric_id(match_id)}/summary.json")

    def season_schedule(self, season_id: str) -> ProxyResult:
        return self._get(f"/seasons/{extract_numeric_id(season_id)}/schedule.json")

    def season_standings(self, season_id: str) -> ProxyResult:
        return self._get(f"/seasons/{extract_numeric_id(season_id)}/standings.json")

    def daily_summaries(self, date_iso: str) -> ProxyResult:
        return self._get(f"/schedules/{date_iso}/summaries.json")

    def competitor_profile(self, team_id: str) -> ProxyResult:
        return self._get(f"/competitors/{extract_numeric_id(team_id)}/profile.json")

    def test_connection(self) -> bool:
        try:
            self.competitions()
        except ProxyError as e:
            logger.warning("Connection check failed: %s (%s)", e.kind.value, e.status_code)
            return False
        return True
