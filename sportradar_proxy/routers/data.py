# sportradar_proxy/routers/data.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from ..clients.sportradar import SportradarClient
from ..deps import get_sportradar_client
from .proxy import cached_json

router = APIRouter(prefix="/data", tags=["data"])


@router.get("/competitions", summary="All competitions")
def competitions(client: SportradarClient = Depends(get_sportradar_client)):
    return cached_json(client.competitions())


@router.get("/live", summary="Live match summaries")
def live(client: SportradarClient = Depends(get_sportradar_client)):
    return cached_json(client.live_summaries())


@router.get("/matches/{match_id}", summary="Match summary by id or URN")
def match_summary(match_id: str, client: SportradarClient = Depends(get_sportradar_client)):
    return cached_json(client.match_summary(match_id))


@router.get("/seasons/{season_id}/schedule", summary="Season schedule")
def season_schedule(season_id: str, client: SportradarClient = Depends(get_sportradar_client)):
    return cached_json(client.season_schedule(season_id))


@router.get("/seasons/{season_id}/standings", summary="Season standings")
def season_standings(season_id: str, client: SportradarClient = Depends(get_sportradar_client)):
    return cached_json(client.season_standings(season_id))


@router.get("/schedules/{date}", summary="Match summaries for one day")
def daily_summaries(
    date: str = Path(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD"),
    client: SportradarClient = Depends(get_sportradar_client),
):
    return cached_json(client.daily_summaries(date))


@router.get("/competitors/{team_id}", summary="Competitor (team) profile")
def competitor_profile(team_id: str, client: SportradarClient = Depends(get_sportradar_client)):
    return cached_json(client.competitor_profile(team_id))


@router.get("/connection", summary="Check that the upstream answers with the configured key")
def connection(client: SportradarClient = Depends(get_sportradar_client)):
    return {"connected": client.test_connection()}
