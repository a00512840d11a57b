"""Persist and load league context profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from pyleague.config import LeagueContext, Phase, TeamInfo


@dataclass
class LeagueProfile:
    season: int
    phase: int = int(Phase.REGULAR_SEASON)
    num_teams: int = 30
    starting_season: int | None = None
    user_tid: int = 0
    num_games: int = 82
    num_playoff_rounds: int = 4
    teams: List[Dict[str, str]] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "LeagueProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            season=int(data["season"]),
            phase=int(data.get("phase", Phase.REGULAR_SEASON)),
            num_teams=int(data.get("num_teams", 30)),
            starting_season=data.get("starting_season"),
            user_tid=int(data.get("user_tid", 0)),
            num_games=int(data.get("num_games", 82)),
            num_playoff_rounds=int(data.get("num_playoff_rounds", 4)),
            teams=data.get("teams", []),
        )

    @classmethod
    def from_context(cls, context: LeagueContext) -> "LeagueProfile":
        return cls(
            season=context.season,
            phase=int(context.phase),
            num_teams=context.num_teams,
            starting_season=context.starting_season,
            user_tid=context.user_tid,
            num_games=context.num_games,
            num_playoff_rounds=context.num_playoff_rounds,
            teams=[
                {"region": team.region, "name": team.name, "abbrev": team.abbrev}
                for team in context.teams
            ],
        )

    def to_context(self) -> LeagueContext:
        return LeagueContext(
            season=self.season,
            phase=Phase(self.phase),
            num_teams=self.num_teams,
            starting_season=self.starting_season,
            user_tid=self.user_tid,
            num_games=self.num_games,
            num_playoff_rounds=self.num_playoff_rounds,
            teams=tuple(
                TeamInfo(region=team["region"], name=team["name"], abbrev=team["abbrev"])
                for team in self.teams
            ),
        )

    def save(self, path: Path) -> None:
        payload = {
            "season": self.season,
            "phase": self.phase,
            "num_teams": self.num_teams,
            "starting_season": self.starting_season,
            "user_tid": self.user_tid,
            "num_games": self.num_games,
            "num_playoff_rounds": self.num_playoff_rounds,
            "teams": self.teams,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
