"""Team records consumed by free agency."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from .player import Contract, _Record


class TeamSeason(_Record):
    season: int
    hype: float = Field(default=0.5, ge=0.0, le=1.0)
    pop: float = Field(default=5.0, ge=0.0)
    playoff_rounds_won: int = -1
    # Rank of facilities spending over the last three seasons, 1 is highest.
    facilities_rank: Optional[float] = None


class Team(_Record):
    tid: int = Field(..., ge=0)
    region: str = ""
    name: str = ""
    abbrev: str = ""
    seasons: List[TeamSeason] = Field(..., min_length=1)

    @property
    def latest_season(self) -> TeamSeason:
        return self.seasons[-1]


class ReleasedPlayer(_Record):
    """Salary still owed by a team to a player it released."""

    pid: Optional[int] = None
    tid: int
    contract: Contract
