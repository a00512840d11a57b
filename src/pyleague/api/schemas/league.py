from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from pyleague.config import LeagueContext, Phase, TeamInfo


class TeamInfoPayload(BaseModel):
    region: str
    name: str
    abbrev: str


class LeaguePayload(BaseModel):
    season: int
    phase: int = Field(default=int(Phase.REGULAR_SEASON), ge=int(Phase.FANTASY_DRAFT), le=int(Phase.FREE_AGENCY))
    num_teams: int = Field(default=30, ge=1)
    starting_season: int | None = None
    user_tid: int = Field(default=0, ge=0)
    num_games: int = Field(default=82, ge=1)
    num_playoff_rounds: int = Field(default=4, ge=0)
    teams: List[TeamInfoPayload] = Field(default_factory=list)

    @classmethod
    def from_context(cls, context: LeagueContext) -> "LeaguePayload":
        return cls(
            season=context.season,
            phase=int(context.phase),
            num_teams=context.num_teams,
            starting_season=context.starting_season,
            user_tid=context.user_tid,
            num_games=context.num_games,
            num_playoff_rounds=context.num_playoff_rounds,
            teams=[TeamInfoPayload(region=t.region, name=t.name, abbrev=t.abbrev) for t in context.teams],
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
            teams=tuple(TeamInfo(region=t.region, name=t.name, abbrev=t.abbrev) for t in self.teams),
        )
