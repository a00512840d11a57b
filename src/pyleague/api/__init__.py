"""REST API for the pyleague engine."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from io import StringIO
from pathlib import Path
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Query
from pydantic import ValidationError

from pyleague.api.schemas import (
    BalanceRequest,
    BalanceResponse,
    BalanceSampleResponse,
    FilterRequest,
    LeaguePayload,
    MoodResponse,
    ReleaseRequest,
    ValueResponse,
)
from pyleague.balance import DEFAULT_PARAMETERS, ParameterBand, run_monte_carlo, write_results_csv
from pyleague.config import LeagueContext
from pyleague.config_loader import LeagueProfile
from pyleague.freeagency import mood_color_text, release
from pyleague.history import filter_players
from pyleague.models import Player, Team
from pyleague.persistence import LeagueStore
from pyleague.players import retire
from pyleague.valuation import value

logger = logging.getLogger(__name__)

DEFAULT_SEASON = 2013
_PROFILE_ENV = "PYLEAGUE_PROFILE"


def _player_payload(player: Player) -> Dict[str, Any]:
    return player.model_dump(mode="json", by_alias=True)


def create_app(store: LeagueStore | None = None, context: LeagueContext | None = None) -> FastAPI:
    app = FastAPI(title="pyleague engine")
    if store is None:
        store = LeagueStore(Path(__file__).resolve().parent.parent / "pyleague.sqlite")
    app.state.store = store
    if context is None:
        profile_path = os.getenv(_PROFILE_ENV)
        if profile_path:
            context = LeagueProfile.load(Path(profile_path)).to_context()
            logger.info("Loaded league profile from %s", profile_path)
        else:
            context = LeagueContext(season=DEFAULT_SEASON)
    app.state.context = context

    def current_context() -> LeagueContext:
        return app.state.context

    def _fetch_player_or_404(tx, pid: int) -> Player:
        player = tx.get("players", pid)
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/league", response_model=LeaguePayload)
    async def get_league():
        return LeaguePayload.from_context(current_context())

    @app.put("/league", response_model=LeaguePayload)
    async def put_league(payload: LeaguePayload):
        app.state.context = payload.to_context()
        logger.info("League context set to season %s phase %s", payload.season, payload.phase)
        return LeaguePayload.from_context(app.state.context)

    @app.put("/teams/{tid}")
    async def put_team(tid: int, payload: Dict[str, Any]):
        try:
            team = Team.model_validate({**payload, "tid": tid})
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        with store.transaction() as tx:
            tx.put("teams", team)
        return team.model_dump(mode="json", by_alias=True)

    @app.get("/teams")
    async def list_teams():
        with store.transaction() as tx:
            teams = tx.get_all("teams")
        return [team.model_dump(mode="json", by_alias=True) for team in teams]

    @app.put("/players/{pid}")
    async def put_player(pid: int, payload: Dict[str, Any]):
        try:
            player = Player.model_validate({**payload, "pid": pid})
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        with store.transaction() as tx:
            tx.put("players", player)
        return _player_payload(player)

    @app.get("/players/{pid}")
    async def get_player(pid: int):
        with store.transaction() as tx:
            player = _fetch_player_or_404(tx, pid)
        return _player_payload(player)

    @app.post("/players/filter")
    async def filter_endpoint(request: FilterRequest) -> List[Dict[str, Any]]:
        with store.transaction() as tx:
            if request.pids is None:
                players = tx.get_all("players")
            else:
                players = [tx.get("players", pid) for pid in request.pids]
        players = [player for player in players if player is not None]
        try:
            return filter_players(players, request.to_options(), context=current_context())
        except KeyError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.get("/players/{pid}/value", response_model=ValueResponse)
    async def player_value(pid: int, fuzz: bool = Query(False)):
        context = current_context()
        with store.transaction() as tx:
            player = _fetch_player_or_404(tx, pid)
        return ValueResponse(
            pid=pid,
            value=value(player, context=context, fuzz=fuzz),
            value_no_pot=value(player, context=context, no_pot=True, fuzz=fuzz),
        )

    @app.get("/players/{pid}/mood", response_model=MoodResponse)
    async def player_mood(pid: int, tid: int | None = Query(None)):
        tid = current_context().user_tid if tid is None else tid
        with store.transaction() as tx:
            player = _fetch_player_or_404(tx, pid)
        try:
            descriptor = mood_color_text(player, tid=tid)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return MoodResponse(pid=pid, tid=tid, mood=player.free_agent_mood[tid], **asdict(descriptor))

    @app.post("/players/{pid}/release")
    async def release_player(pid: int, request: ReleaseRequest | None = None):
        request = request or ReleaseRequest()
        with store.transaction() as tx:
            player = _fetch_player_or_404(tx, pid)
            if player.tid < 0:
                raise HTTPException(status_code=400, detail="Player is not on a roster")
            player = release(tx, player, just_drafted=request.just_drafted, context=current_context())
        return _player_payload(player)

    @app.post("/players/{pid}/retire")
    async def retire_player(pid: int):
        with store.transaction() as tx:
            player = _fetch_player_or_404(tx, pid)
            player = tx.put("players", retire(player, context=current_context()))
        return _player_payload(player)

    @app.post("/balance", response_model=BalanceResponse)
    async def balance(request: BalanceRequest):
        try:
            parameters = DEFAULT_PARAMETERS.with_bands(
                {name: ParameterBand(low, high) for name, (low, high) in request.bands.items()}
            )
        except KeyError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        results = run_monte_carlo(parameters, request.samples, rounds=request.rounds, workers=1, seed=request.seed)
        buffer = StringIO()
        write_results_csv(results, buffer)
        return BalanceResponse(
            samples=[
                BalanceSampleResponse(tendencies=asdict(result.tendencies), score=result.score)
                for result in results
            ],
            csv=buffer.getvalue(),
        )

    return app
