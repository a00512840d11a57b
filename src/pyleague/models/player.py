"""Canonical player models shared by the rating, contract and history layers."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


RATING_KEYS: Tuple[str, ...] = (
    "hgt",
    "stre",
    "spd",
    "jmp",
    "endu",
    "ins",
    "dnk",
    "ft",
    "fg",
    "tp",
    "blk",
    "stl",
    "drb",
    "pss",
    "reb",
)

Position = Literal["PG", "SG", "SF", "PF", "C", "G", "GF", "FC", "F"]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def evolve(self, **changes: Any):
        """Return a validated copy with ``changes`` applied."""

        return type(self).model_validate({**dict(self), **changes})


class RatingRow(_Record):
    """One season of latent ability."""

    season: int
    hgt: int = Field(..., ge=0, le=100)
    stre: int = Field(..., ge=0, le=100)
    spd: int = Field(..., ge=0, le=100)
    jmp: int = Field(..., ge=0, le=100)
    endu: int = Field(..., ge=0, le=100)
    ins: int = Field(..., ge=0, le=100)
    dnk: int = Field(..., ge=0, le=100)
    ft: int = Field(..., ge=0, le=100)
    fg: int = Field(..., ge=0, le=100)
    tp: int = Field(..., ge=0, le=100)
    blk: int = Field(..., ge=0, le=100)
    stl: int = Field(..., ge=0, le=100)
    drb: int = Field(..., ge=0, le=100)
    pss: int = Field(..., ge=0, le=100)
    reb: int = Field(..., ge=0, le=100)
    ovr: int = 0
    pot: int = 0
    skills: List[str] = Field(default_factory=list)
    fuzz: float = 0.0

    def attributes(self) -> Dict[str, int]:
        return {key: getattr(self, key) for key in RATING_KEYS}


class StatRow(_Record):
    """Raw season totals for one (season, team, playoffs) key."""

    season: int
    tid: int
    playoffs: bool = False
    gp: int = 0
    gs: int = 0
    min: float = 0.0
    fg: int = 0
    fga: int = 0
    fg_at_rim: int = 0
    fga_at_rim: int = 0
    fg_low_post: int = 0
    fga_low_post: int = 0
    fg_mid_range: int = 0
    fga_mid_range: int = 0
    tp: int = 0
    tpa: int = 0
    ft: int = 0
    fta: int = 0
    orb: int = 0
    drb: int = 0
    trb: int = 0
    ast: int = 0
    tov: int = 0
    stl: int = 0
    blk: int = 0
    pf: int = 0
    pts: int = 0
    per: float = 0.0
    ewa: float = 0.0

    @property
    def key(self) -> Tuple[int, int, bool]:
        return (self.season, self.tid, self.playoffs)


class Contract(_Record):
    amount: int = Field(..., ge=0)
    exp: int


class SalaryEntry(_Record):
    season: int
    amount: int


class Born(_Record):
    year: int
    loc: str = "USA"


class DraftInfo(_Record):
    round: int = 0
    pick: int = 0
    tid: int = -1
    original_tid: int = -1
    year: int
    team_name: Optional[str] = None
    team_region: Optional[str] = None
    pot: int = 0
    ovr: int = 0
    skills: List[str] = Field(default_factory=list)


class Injury(_Record):
    type: str = "Healthy"
    games_remaining: int = 0


class Award(_Record):
    season: int
    type: str


class Player(_Record):
    """A player and the whole of their accumulated history."""

    pid: Optional[int] = None
    name: str = ""
    tid: int
    pos: Position = "F"
    hgt: int = 77
    weight: int = 220
    born: Born
    college: str = ""
    ratings: List[RatingRow] = Field(..., min_length=1)
    stats: List[StatRow] = Field(default_factory=list)
    stats_tids: List[int] = Field(default_factory=list)
    contract: Contract
    salaries: List[SalaryEntry] = Field(default_factory=list)
    free_agent_mood: List[float] = Field(default_factory=list)
    years_free_agent: int = 0
    retired_year: Optional[int] = None
    draft: DraftInfo
    awards: List[Award] = Field(default_factory=list)
    injury: Injury = Field(default_factory=Injury)
    pt_modifier: float = 1.0
    hof: bool = False
    watch: bool = False
    games_until_tradable: int = 0

    @model_validator(mode="after")
    def _check_history(self) -> "Player":
        seasons = [row.season for row in self.ratings]
        if any(later <= earlier for earlier, later in zip(seasons, seasons[1:])):
            raise ValueError(f"rating seasons must be strictly increasing, got {seasons}")
        keys = [row.key for row in self.stats]
        if len(keys) != len(set(keys)):
            raise ValueError("duplicate (season, tid, playoffs) stats rows")
        return self

    @property
    def latest_ratings(self) -> RatingRow:
        return self.ratings[-1]

    def age(self, season: int) -> int:
        return season - self.born.year

    def regular_season_stats(self) -> List[StatRow]:
        return [row for row in self.stats if not row.playoffs]
